"""
Pytest configuration and fixtures for ogre_skin tests.
"""

import io

import pytest

from ogre_skin.material import MaterialResolver
from ogre_skin.resources import DirectoryResources, TextureCache


SKIN_MATERIAL = """\
material Skin
{
    technique
    {
        pass
        {
            ambient 0.5 0.5 0.5 1.0
            diffuse 1.0 0.8 0.6 1.0
            specular 0.1 0.2 0.3 0.4
            emissive 0.0 0.1 0.2
            texture_unit
            {
                texture textures/Skin.PNG
            }
        }
    }
}
"""


def xml_stream(text: str) -> io.BytesIO:
    """Wrap XML text as a binary stream the parsers accept."""
    return io.BytesIO(text.encode("utf-8"))


def skeleton_xml(body: str) -> io.BytesIO:
    return xml_stream(f"<skeleton>{body}</skeleton>")


def mesh_xml(body: str) -> io.BytesIO:
    return xml_stream(f"<mesh><submeshes>{body}</submeshes></mesh>")


def bone_xml(index: int, name: str, pos=(0.0, 0.0, 0.0), angle: float = 0.0, axis=(0.0, 0.0, 1.0)) -> str:
    return (
        f'<bone id="{index}" name="{name}">'
        f'<position x="{pos[0]}" y="{pos[1]}" z="{pos[2]}"/>'
        f'<rotation angle="{angle}"><axis x="{axis[0]}" y="{axis[1]}" z="{axis[2]}"/></rotation>'
        f'</bone>'
    )


def keyframe_xml(time: float, tx: float = 0.0) -> str:
    return (
        f'<keyframe time="{time}">'
        f'<translate x="{tx}" y="0" z="0"/>'
        f'<rotate angle="0"><axis x="1" y="0" z="0"/></rotate>'
        f'</keyframe>'
    )


@pytest.fixture
def resource_dir(tmp_path):
    """Resource tree with one material, its texture and a bump map."""
    raw = tmp_path / "app" / "raw"
    drawable = tmp_path / "app" / "drawable"
    raw.mkdir(parents=True)
    drawable.mkdir(parents=True)
    (raw / "skin.material").write_text(SKIN_MATERIAL, encoding="utf-8")
    (raw / "plain.material").write_text("diffuse 1 1 1 1\n", encoding="utf-8")
    (drawable / "skin.png").write_bytes(b"\x89PNG")
    (drawable / "skin_normal.png").write_bytes(b"\x89PNG")
    return tmp_path


@pytest.fixture
def resources(resource_dir):
    return DirectoryResources(resource_dir, package="app")


@pytest.fixture
def texture_cache():
    return TextureCache()


@pytest.fixture
def materials(resources, texture_cache):
    return MaterialResolver(resources, texture_cache)
