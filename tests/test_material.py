"""
Tests for material descriptor parsing and texture resolution.
"""

import io

import numpy as np
import pytest

from ogre_skin.errors import ResourceNotFoundError
from ogre_skin.material import DEFAULT_SHININESS, DEFAULT_TRANSPARENCY, Material, MaterialResolver
from ogre_skin.resources import TextureCache


class TestMaterial:

    def test_defaults(self):
        material = Material()
        assert np.allclose(material.emissive, [0.0, 0.0, 0.0, 1.0])
        assert material.shininess == 1.0
        assert material.transparency == 1.0
        assert material.texture is None
        assert material.bump_texture is None


class TestMaterialResolver:

    def test_resolves_colors_and_texture(self, materials, resource_dir):
        passes = materials.resolve_render_passes("Skin")
        assert len(passes) == 1
        material = passes[0].material
        assert material.name == "skin"
        assert np.allclose(material.ambient, [0.5, 0.5, 0.5, 1.0])
        assert np.allclose(material.diffuse, [1.0, 0.8, 0.6, 1.0])
        assert np.allclose(material.specular, [0.1, 0.2, 0.3, 0.4])
        assert np.allclose(material.emissive, [0.0, 0.1, 0.2, 1.0])
        assert material.texture == str(resource_dir / "app" / "drawable" / "skin.png")
        assert material.bump_texture is None

    def test_material_name_is_stripped(self, materials):
        material = materials.resolve_material("media/materials/SKIN.material")
        assert material.name == "skin"
        assert material is materials.resolve_material("skin")

    def test_non_utf8_descriptor_still_loads(self, resources, texture_cache, resource_dir):
        raw = resource_dir / "app" / "raw"
        (raw / "latin.material").write_bytes(b"// caf\xe9 skin\ndiffuse 1 1 1 1\n")
        material = MaterialResolver(resources, texture_cache).resolve_material("latin")
        assert np.allclose(material.diffuse, [1.0, 1.0, 1.0, 1.0])

    def test_shininess_and_transparency_stay_fixed(self, materials):
        material = materials.read_material(io.StringIO("shininess 40\ntransparency 0.2\n"), "shiny")
        assert material.shininess == DEFAULT_SHININESS
        assert material.transparency == DEFAULT_TRANSPARENCY

    def test_emissive_alpha_forced(self, materials):
        material = materials.read_material(io.StringIO("emissive 0.3 0.2 0.1 0.0\n"))
        assert np.allclose(material.emissive, [0.3, 0.2, 0.1, 1.0])

    def test_malformed_and_unknown_lines_are_ignored(self, materials):
        descriptor = (
            "// comment\n"
            "\n"
            "ambient 1 2\n"
            "diffuse red green blue alpha\n"
            "lighting off\n"
            "texture\n"
            "specular 0.5 0.5 0.5 0.5\n"
        )
        material = materials.read_material(io.StringIO(descriptor))
        assert np.allclose(material.ambient, 0.0)
        assert np.allclose(material.diffuse, 0.0)
        assert np.allclose(material.specular, 0.5)
        assert material.texture is None

    def test_bump_texture(self, resources, resource_dir):
        cache = TextureCache(factory=lambda identifier: ("gl", identifier))
        resolver = MaterialResolver(resources, cache)
        material = resolver.read_material(io.StringIO(
            "texture skin.png\ntexture_bump C:\\art\\Skin_Normal.TGA\n"
        ))
        assert material.texture == ("gl", str(resource_dir / "app" / "drawable" / "skin.png"))
        assert material.bump_texture == ("gl", str(resource_dir / "app" / "drawable" / "skin_normal.png"))
        assert len(cache) == 2

    def test_texture_cache_is_shared(self, resources):
        created = []
        cache = TextureCache(factory=lambda identifier: created.append(identifier) or len(created))
        resolver = MaterialResolver(resources, cache)
        first = resolver.read_material(io.StringIO("texture skin.png\n"))
        second = resolver.read_material(io.StringIO("texture textures/SKIN.jpg\n"))
        assert first.texture == second.texture == 1
        assert len(created) == 1

    def test_missing_material(self, materials):
        with pytest.raises(ResourceNotFoundError, match="nothing") as excinfo:
            materials.resolve_render_passes("Nothing.material")
        assert excinfo.value.name == "nothing"

    def test_missing_texture(self, materials):
        with pytest.raises(ResourceNotFoundError, match="wood"):
            materials.read_material(io.StringIO("texture wood.png\n"))
