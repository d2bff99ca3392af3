"""Unit tests for instance and part mask decoding."""
import numpy as np
import pytest

from personlab.decoding.instance_masks import (
    BACKGROUND,
    compute_embeddings,
    decode_instance_mask,
    embedding_distance,
    split_instance_masks,
    to_mask,
)
from personlab.decoding.part_masks import decode_part_segmentation, decode_person_part_masks
from personlab.models.pose_data import Pose


@pytest.fixture
def zero_long_offsets():
    return np.zeros((8, 8, 34), dtype=np.float32)


class TestToMask:

    def test_strictly_above_threshold(self):
        scores = np.array([[0.2, 0.5], [0.51, 1.0]])
        assert to_mask(scores, 0.5).tolist() == [[0, 0], [1, 1]]
        assert to_mask(scores, 0.5).dtype == np.uint8

    def test_accepts_boolean_masks(self):
        assert to_mask(np.array([[True, False]]), 0.5).tolist() == [[1, 0]]


class TestComputeEmbeddings:

    def test_zero_offsets_embed_at_pixel(self, zero_long_offsets):
        embeddings = compute_embeddings(np.array([3]), np.array([5]), zero_long_offsets, np.arange(17))
        assert embeddings.shape == (1, 17, 2)
        assert np.all(embeddings[0] == [3, 5])

    def test_refine_steps_follow_offsets_repeatedly(self, zero_long_offsets):
        long_offsets = zero_long_offsets.copy()
        long_offsets[0, 0, 0] = 2.0     # dy for keypoint 0 at pixel (0, 0)
        long_offsets[2, 0, 0] = 3.0     # dy for keypoint 0 at pixel (2, 0)
        one = compute_embeddings(np.array([0]), np.array([0]), long_offsets, np.array([0]), refine_steps=1)
        two = compute_embeddings(np.array([0]), np.array([0]), long_offsets, np.array([0]), refine_steps=2)
        assert one[0, 0].tolist() == [2.0, 0.0]
        assert two[0, 0].tolist() == [5.0, 0.0]

    def test_clamped_to_image(self, zero_long_offsets):
        long_offsets = zero_long_offsets.copy()
        long_offsets[..., 17] = 100.0   # dx for keypoint 0
        embeddings = compute_embeddings(np.array([1]), np.array([1]), long_offsets, np.array([0]))
        assert embeddings[0, 0].tolist() == [1.0, 7.0]

    def test_embedding_distance_uses_confident_keypoints(self):
        positions = np.array([[0.0, 0.0], [0.0, 10.0]], dtype=np.float32)
        pose = Pose.from_arrays(positions, np.array([0.9, 0.1]))
        embeddings = np.zeros((1, 2, 2), dtype=np.float32)
        distances = embedding_distance(embeddings, pose, np.array([0, 1]))
        assert distances.tolist() == [0.0]

        unconfident = Pose.from_arrays(positions, np.array([0.1, 0.1]))
        distances = embedding_distance(embeddings, unconfident, np.array([0, 1]))
        assert distances.tolist() == [50.0]


class TestDecodeInstanceMask:

    def test_nearest_pose_wins(self, make_pose, zero_long_offsets):
        poses = [make_pose(2.0, 2.0), make_pose(2.0, 6.0)]
        mask = np.ones((8, 8), dtype=np.uint8)
        instance_mask = decode_instance_mask(mask, zero_long_offsets, poses)

        assert instance_mask.dtype == np.int32
        assert np.all(instance_mask[:, :4] == 0)
        assert np.all(instance_mask[:, 5:] == 1)
        # column 4 is equidistant: the earlier pose keeps it
        assert np.all(instance_mask[:, 4] == 0)

    def test_long_offsets_redirect_pixel(self, make_pose, zero_long_offsets):
        poses = [make_pose(2.0, 2.0), make_pose(2.0, 6.0)]
        long_offsets = zero_long_offsets.copy()
        long_offsets[7, 7, :17] = -5.0
        long_offsets[7, 7, 17:] = -5.0
        mask = np.zeros((8, 8), dtype=np.uint8)
        mask[7, 7] = 1

        instance_mask = decode_instance_mask(mask, long_offsets, poses)
        assert instance_mask[7, 7] == 0

    def test_background_pixels_get_sentinel(self, make_pose, zero_long_offsets):
        mask = np.zeros((8, 8), dtype=np.uint8)
        mask[0, 0] = 1
        instance_mask = decode_instance_mask(mask, zero_long_offsets, [make_pose(2.0, 2.0)])
        assert instance_mask[0, 0] == 0
        assert np.count_nonzero(instance_mask == BACKGROUND) == 63

    def test_no_poses_means_all_background(self, zero_long_offsets):
        instance_mask = decode_instance_mask(np.ones((8, 8)), zero_long_offsets, [])
        assert np.all(instance_mask == BACKGROUND)

    def test_low_confidence_pose_still_matchable(self, make_pose, zero_long_offsets):
        poses = [make_pose(2.0, 2.0, score=0.9), make_pose(6.0, 6.0, score=0.1)]
        instance_mask = decode_instance_mask(np.ones((8, 8)), zero_long_offsets, poses)
        assert instance_mask[7, 7] == 1
        assert instance_mask[0, 0] == 0

    def test_unconfident_keypoints_ignored(self, zero_long_offsets):
        positions = np.tile(np.array([[1.0, 1.0]], dtype=np.float32), (17, 1))
        positions[1:] = [7.0, 7.0]
        scores = np.full(17, 0.1, dtype=np.float32)
        scores[0] = 0.9
        near_origin = Pose.from_arrays(positions, scores)
        far = Pose.from_arrays(np.full((17, 2), 4.0, dtype=np.float32), np.full(17, 0.9))

        mask = np.zeros((8, 8), dtype=np.uint8)
        mask[2, 2] = 1
        instance_mask = decode_instance_mask(mask, zero_long_offsets, [far, near_origin])
        # only keypoint 0 of near_origin counts, and it sits next to the pixel
        assert instance_mask[2, 2] == 1

    def test_num_keypoints_for_matching(self, zero_long_offsets):
        positions = np.full((17, 2), 7.0, dtype=np.float32)
        positions[0] = [0.0, 0.0]
        first_only_near = Pose.from_arrays(positions, np.full(17, 0.9))
        middle = Pose.from_arrays(np.full((17, 2), 3.0, dtype=np.float32), np.full(17, 0.9))

        mask = np.zeros((8, 8), dtype=np.uint8)
        mask[0, 0] = 1
        all_types = decode_instance_mask(mask, zero_long_offsets, [middle, first_only_near])
        first_type = decode_instance_mask(mask, zero_long_offsets, [middle, first_only_near],
                                          num_keypoints_for_matching=1)
        assert all_types[0, 0] == 0
        assert first_type[0, 0] == 1

    def test_split_instance_masks(self):
        instance_mask = np.array([[0, 1], [-1, 1]], dtype=np.int32)
        masks = split_instance_masks(instance_mask, 2)
        assert masks[0].tolist() == [[1, 0], [0, 0]]
        assert masks[1].tolist() == [[0, 1], [0, 1]]


class TestDecodePartSegmentation:

    @pytest.fixture
    def part_heatmaps(self):
        heatmaps = np.zeros((2, 2, 24), dtype=np.float32)
        heatmaps[0, 0, 3] = 1.0
        heatmaps[0, 1, 5] = 1.0
        heatmaps[1, 0, 12] = 1.0
        heatmaps[1, 1, 23] = 1.0
        return heatmaps

    def test_nearest_cell_argmax(self, part_heatmaps):
        part_mask = decode_part_segmentation(np.ones((16, 16)), part_heatmaps, 8)

        assert part_mask.dtype == np.int32
        assert part_mask[0, 0] == 3
        assert part_mask[3, 3] == 3
        assert part_mask[0, 15] == 5
        assert part_mask[15, 0] == 12
        assert part_mask[4, 4] == 23

    def test_background_sentinel(self, part_heatmaps):
        mask = np.ones((16, 16))
        mask[:, 8:] = 0
        part_mask = decode_part_segmentation(mask, part_heatmaps, 8)
        assert np.all(part_mask[:, 8:] == BACKGROUND)
        assert np.all(part_mask[:, :8] >= 0)

    def test_person_part_masks(self):
        instance_mask = np.array([[0, 1], [1, -1]], dtype=np.int32)
        part_mask = np.array([[4, 7], [9, -1]], dtype=np.int32)
        per_person = decode_person_part_masks(instance_mask, part_mask, 2)
        assert per_person[0].tolist() == [[4, -1], [-1, -1]]
        assert per_person[1].tolist() == [[-1, 7], [9, -1]]
