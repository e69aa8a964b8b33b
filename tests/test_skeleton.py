"""
Tests for skeleton parsing, hierarchy validation and the inverse bind pose.
"""

import numpy as np
import pytest

from ogre_skin.errors import FormatError, ParseError
from ogre_skin.skeleton import read_skeleton

from conftest import bone_xml, skeleton_xml


def chain_skeleton_xml() -> str:
    bones = (
        bone_xml(0, "root", pos=(0.0, 1.0, 0.0), angle=0.3, axis=(1.0, 0.0, 0.0))
        + bone_xml(1, "spine", pos=(0.0, 2.0, 0.0), angle=1.2, axis=(1.0, 1.0, 0.0))
        + bone_xml(2, "head", pos=(0.5, 1.0, -0.25), angle=-0.7, axis=(0.0, 0.0, 1.0))
        + bone_xml(3, "arm", pos=(1.0, 0.0, 0.0), angle=2.0, axis=(0.0, 1.0, 0.0))
    )
    links = (
        '<boneparent bone="spine" parent="root"/>'
        '<boneparent bone="head" parent="spine"/>'
        '<boneparent bone="arm" parent="spine"/>'
    )
    return f"<bones>{bones}</bones><bonehierarchy>{links}</bonehierarchy>"


class TestReadSkeleton:

    def test_single_root_bone(self):
        skeleton = read_skeleton(skeleton_xml(f"<bones>{bone_xml(0, 'root')}</bones>"))
        assert skeleton.get_bone_count() == 1
        assert skeleton.bones[0].name == "root"
        assert skeleton.bones[0].parent_index == -1
        assert skeleton.inv_bind_pose[0].is_identity()

    def test_translated_root_inverse_bind_pose(self):
        bones = f"<bones>{bone_xml(0, 'root', pos=(1.0, 2.0, 3.0), angle=0.5, axis=(0.0, 1.0, 0.0))}</bones>"
        skeleton = read_skeleton(skeleton_xml(bones))
        root = skeleton.bones[0]
        assert np.allclose(skeleton.inv_bind_pose[0].apply(root.position), np.zeros(3))
        assert (skeleton.bind_pose[0] * skeleton.inv_bind_pose[0]).is_identity(tol=1e-9)

    def test_parent_links(self):
        skeleton = read_skeleton(skeleton_xml(chain_skeleton_xml()))
        assert [bone.parent_index for bone in skeleton.bones] == [-1, 0, 1, 1]
        assert skeleton.get_bone_by_name("arm").index == 3
        assert [b.name for b in skeleton.get_children(skeleton.bones[1])] == ["head", "arm"]
        assert [b.name for b in skeleton.get_root_bones()] == ["root"]

    def test_preorder_invariant(self):
        skeleton = read_skeleton(skeleton_xml(chain_skeleton_xml()))
        assert skeleton.bones[0].parent_index == -1
        for i, bone in enumerate(skeleton.bones[1:], start=1):
            assert bone.parent_index < i

    def test_global_bind_times_inverse_is_identity(self):
        skeleton = read_skeleton(skeleton_xml(chain_skeleton_xml()))
        assert len(skeleton.inv_bind_pose) == skeleton.get_bone_count()
        for bind, inv in zip(skeleton.bind_pose, skeleton.inv_bind_pose):
            assert (bind * inv).is_identity(tol=1e-9)
            assert (inv * bind).is_identity(tol=1e-9)

    def test_bind_pose_composes_parent_then_local(self):
        skeleton = read_skeleton(skeleton_xml(chain_skeleton_xml()))
        root, spine, head = skeleton.bones[0], skeleton.bones[1], skeleton.bones[2]
        head_origin = root.transform.apply(spine.transform.apply(head.transform.apply(np.zeros(3))))
        assert np.allclose(skeleton.bind_pose[2].apply(np.zeros(3)), head_origin)
        assert np.allclose(skeleton.inv_bind_pose[2].apply(head_origin), np.zeros(3))

    def test_sibling_roots_are_allowed(self):
        body = bone_xml(0, "root") + bone_xml(1, "prop")
        skeleton = read_skeleton(skeleton_xml(body))
        assert [b.parent_index for b in skeleton.bones] == [-1, -1]

    def test_out_of_order_bone_id(self):
        body = bone_xml(0, "root") + bone_xml(2, "skipped")
        with pytest.raises(FormatError, match="out-of-order bone id"):
            read_skeleton(skeleton_xml(body))

    def test_first_bone_must_have_id_zero(self):
        with pytest.raises(FormatError, match="out-of-order bone id"):
            read_skeleton(skeleton_xml(bone_xml(1, "root")))

    def test_duplicate_bone_name(self):
        body = bone_xml(0, "root") + bone_xml(1, "root")
        with pytest.raises(FormatError, match="duplicate bone name"):
            read_skeleton(skeleton_xml(body))

    def test_unknown_parent_name(self):
        body = bone_xml(0, "root") + bone_xml(1, "child") + '<boneparent bone="child" parent="ghost"/>'
        with pytest.raises(FormatError, match="unknown bone name"):
            read_skeleton(skeleton_xml(body))

    def test_unknown_child_name(self):
        body = bone_xml(0, "root") + '<boneparent bone="ghost" parent="root"/>'
        with pytest.raises(FormatError, match="unknown bone name"):
            read_skeleton(skeleton_xml(body))

    def test_parent_after_child_is_malformed(self):
        body = bone_xml(0, "root") + bone_xml(1, "child") + bone_xml(2, "parent") + (
            '<boneparent bone="parent" parent="root"/>'
            '<boneparent bone="child" parent="parent"/>'
        )
        with pytest.raises(FormatError, match="malformed bone hierarchy"):
            read_skeleton(skeleton_xml(body))

    def test_root_with_parent_is_malformed(self):
        body = bone_xml(0, "root") + bone_xml(1, "child") + '<boneparent bone="root" parent="child"/>'
        with pytest.raises(FormatError, match="malformed bone hierarchy"):
            read_skeleton(skeleton_xml(body))

    def test_empty_skeleton_is_malformed(self):
        with pytest.raises(FormatError, match="malformed bone hierarchy"):
            read_skeleton(skeleton_xml("<bones/>"))

    def test_non_integer_bone_id(self):
        with pytest.raises(ParseError):
            read_skeleton(skeleton_xml('<bone id="zero" name="root"/>'))

    def test_malformed_xml(self):
        with pytest.raises(ParseError):
            read_skeleton(skeleton_xml(bone_xml(0, "root") + "<bones>"))

    def test_to_json(self):
        data = read_skeleton(skeleton_xml(chain_skeleton_xml())).to_json()
        assert data["bone_count"] == 4
        assert data["bones"][2]["parent_index"] == 1
        assert len(data["inv_bind_pose"]) == 4
