"""Unit tests for decoded pose data structures."""
import dataclasses

import numpy as np
import pytest

from personlab.models.pose_data import (
    Keypoint,
    PartSegmentation,
    PersonSegmentation,
    Pose,
    filter_poses_by_confidence,
)


class TestKeypoint:

    def test_to_dict_and_list(self):
        kp = Keypoint(part="NOSE", x=10.0, y=20.0, score=0.8)
        assert kp.to_dict() == {"part": "NOSE", "x": 10.0, "y": 20.0, "score": 0.8}
        assert kp.to_list() == [10.0, 20.0]

    def test_immutable(self):
        kp = Keypoint(part="NOSE", x=10.0, y=20.0, score=0.8)
        with pytest.raises(dataclasses.FrozenInstanceError):
            kp.x = 5.0


class TestPose:

    @pytest.fixture
    def pose(self):
        positions = np.array([[1.0, 2.0], [3.0, 4.0]], dtype=np.float32)
        return Pose.from_arrays(positions, np.array([0.4, 0.8]), ["head", "tail"])

    def test_from_arrays(self, pose):
        assert pose.num_keypoints == 2
        assert pose.score == pytest.approx(0.6)
        assert pose.get_keypoint(1) == Keypoint(part="tail", x=4.0, y=3.0, score=pytest.approx(0.8))

    def test_array_views(self, pose):
        np.testing.assert_array_equal(pose.positions(), [[1.0, 2.0], [3.0, 4.0]])
        np.testing.assert_allclose(pose.keypoint_scores(), [0.4, 0.8])

    def test_get_keypoint_by_name(self, make_pose):
        pose = make_pose(5.0, 6.0)
        assert pose.get_keypoint_by_name("left_elbow").part == "LEFT_ELBOW"
        assert pose.get_keypoint_by_name("tail") is None

    def test_get_keypoint_by_name_ignores_case_of_stored_names(self):
        pose = Pose.from_arrays(np.zeros((3, 2), dtype=np.float32), np.full(3, 0.9), ["a", "b", "c"])
        assert pose.get_keypoint_by_name("B").part == "b"
        assert pose.get_keypoint_by_name("c") is pose.keypoints[2]

    def test_too_few_names(self):
        with pytest.raises(ValueError, match="keypoint names"):
            Pose.from_arrays(np.zeros((3, 2)), np.zeros(3), ["only_one"])

    def test_to_dict(self, pose):
        data = pose.to_dict()
        assert data["score"] == pytest.approx(0.6)
        assert [kp["part"] for kp in data["keypoints"]] == ["head", "tail"]


class TestSegmentationResults:

    def test_person_segmentation_to_dict(self, make_pose):
        result = PersonSegmentation(height=1, width=2, data=np.array([[0, -1]]), poses=[make_pose(0.0, 0.0)])
        data = result.to_dict()
        assert result.num_people == 1
        assert data["data"] == [[0, -1]]
        assert len(data["poses"]) == 1

    def test_part_segmentation_to_dict(self):
        result = PartSegmentation(height=1, width=2, data=np.array([[3, -1]]))
        assert result.to_dict() == {"height": 1, "width": 2, "data": [[3, -1]]}


class TestFilterPosesByConfidence:

    def test_filters_below_threshold(self, make_pose):
        poses = [make_pose(0.0, 0.0, score=0.9), make_pose(0.0, 0.0, score=0.2)]
        assert filter_poses_by_confidence(poses, 0.3) == poses[:1]

    def test_threshold_is_inclusive(self, make_pose):
        poses = [make_pose(0.0, 0.0, score=0.5)]
        assert filter_poses_by_confidence(poses, 0.5) == poses
