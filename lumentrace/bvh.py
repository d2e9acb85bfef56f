"""
Bounding Volume Hierarchy (BVH) for accelerating ray-object intersection.

Each node holds an AABB and two children, which are either further nodes
or the primitives themselves. Nodes only rely on the Hittable interface,
so any shape with a bounding box can be placed in the tree.
"""

from __future__ import annotations
from typing import List, Optional

from .ray import Ray
from .bounds import Interval, AABB
from .shapes import Hittable, HitRecord, HittableList


class BVHNode(Hittable):
    """A node in the Bounding Volume Hierarchy tree."""

    def __init__(self, objects: List[Hittable], start: int = 0, end: Optional[int] = None):
        """Build a BVH over objects[start:end].

        The slice is sorted in place along the longest axis of its
        bounding box and split at the median.
        """
        if end is None:
            end = len(objects)

        self.bbox = AABB()
        for obj in objects[start:end]:
            self.bbox = AABB.surrounding(self.bbox, obj.bounding_box())

        object_span = end - start

        if object_span <= 0:
            raise ValueError("BVHNode needs at least one object")

        if object_span == 1:
            self.left = self.right = objects[start]
        elif object_span == 2:
            self.left = objects[start]
            self.right = objects[start + 1]
        else:
            axis = self.bbox.longest_axis()
            objects[start:end] = sorted(
                objects[start:end],
                key=lambda obj: obj.bounding_box().axis_interval(axis).min
            )

            mid = start + object_span // 2
            self.left = BVHNode(objects, start, mid)
            self.right = BVHNode(objects, mid, end)

    def hit(self, ray: Ray, ray_t: Interval) -> Optional[HitRecord]:
        """Test ray intersection with BVH node."""
        if not self.bbox.hit(ray, ray_t):
            return None

        hit_left = self.left.hit(ray, ray_t)

        # A left hit shortens the search on the right
        right_t = Interval(ray_t.min, hit_left.t) if hit_left else ray_t
        hit_right = self.right.hit(ray, right_t)

        return hit_right if hit_right else hit_left

    def bounding_box(self) -> AABB:
        return self.bbox


def build_bvh(world: HittableList) -> Hittable:
    """Build a BVH over the objects of a scene.

    An empty scene is returned unchanged since a tree needs at least one leaf.
    """
    if len(world) == 0:
        return world
    return BVHNode(list(world.objects))
