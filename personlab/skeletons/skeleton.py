import numpy as np
from collections import deque
from typing import Dict, Iterator, List, Tuple


class SkeletonTree:
    """
    Static pose-tree topology used to walk from one keypoint to the rest.
    Bones are (parent, child) pairs; bone order defines the edge index of the
    displacement channels, and the pair order defines the forward direction.
    """
    def __init__(self, joint_names: List[str], str_bone_tuples: List[Tuple[str, str]]):
        """
        Defines the RIGID structure. Raises ValueError unless the bones form a
        single tree spanning every joint.
        """
        self.num_joints = len(joint_names)
        if self.num_joints == 0:
            raise ValueError("Skeleton needs at least one joint.")

        # 1. Topology Metadata
        self.name_to_idx: Dict[str, int] = {name: i for i, name in enumerate(joint_names)}
        self.idx_to_name: List[str] = list(joint_names)
        if len(self.name_to_idx) != self.num_joints:
            raise ValueError("Joint names must be unique.")

        # 2. Conversion: String Tuples -> Int Tuples
        idx_bone_tuples: List[Tuple[int, int]] = []
        for parent_name, child_name in str_bone_tuples:
            if parent_name not in self.name_to_idx or child_name not in self.name_to_idx:
                raise ValueError(f"Bone references unknown joint: ({parent_name}, {child_name})")
            idx_bone_tuples.append((self.name_to_idx[parent_name], self.name_to_idx[child_name]))

        if len(idx_bone_tuples) != self.num_joints - 1:
            raise ValueError(
                f"A tree over {self.num_joints} joints needs {self.num_joints - 1} bones, "
                f"got {len(idx_bone_tuples)}."
            )
        self.num_edges = len(idx_bone_tuples)

        # 3. EDGE INDEX (Matrix Ops) -> Shape: (2, Num_Bones)
        if idx_bone_tuples:
            self.bones_index = np.array(idx_bone_tuples, dtype=np.int32).T
        else:
            self.bones_index = np.zeros((2, 0), dtype=np.int32)

        # 4. ADJACENCY LIST (Graph Ops) -> (neighbor, edge_id, forward)
        self.bones: List[List[Tuple[int, int, bool]]] = [[] for _ in range(self.num_joints)]
        for edge_id, (p_idx, c_idx) in enumerate(idx_bone_tuples):
            self.bones[p_idx].append((c_idx, edge_id, True))
            self.bones[c_idx].append((p_idx, edge_id, False))

        # Edge count is right, so connectivity alone rules out cycles
        reached = {step[1] for step in self.traversal(0)} | {0}
        if len(reached) != self.num_joints:
            missing = [self.idx_to_name[i] for i in range(self.num_joints) if i not in reached]
            raise ValueError(f"Skeleton is not connected; unreachable joints: {missing}")

    def traversal(self, root_id: int) -> Iterator[Tuple[int, int, int, bool]]:
        """
        Breadth-first walk of the tree starting at root_id.

        Yields:
            (source_id, target_id, edge_id, forward) per bone, where forward is
            True when the bone is walked parent -> child.
        """
        if not 0 <= root_id < self.num_joints:
            raise ValueError(f"Root joint {root_id} out of range [0, {self.num_joints})")

        visited = [False] * self.num_joints
        visited[root_id] = True
        queue = deque([root_id])
        while queue:
            source = queue.popleft()
            for target, edge_id, forward in self.bones[source]:
                if visited[target]:
                    continue
                visited[target] = True
                queue.append(target)
                yield source, target, edge_id, forward

