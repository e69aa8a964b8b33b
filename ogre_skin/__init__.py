"""
OGRE Skinned Model Loader

This package reads an OGRE XML mesh and its companion XML skeleton into one
in-memory skinned model:
- Rigid transforms and the XML event stream
- Bones, skeletons and their inverse bind pose
- Animation tracks and keyframes
- Meshes with multi-buffer vertex data and bone weights
- Materials and texture resolution
- The top-level all-or-nothing loader
"""

# Errors
from .errors import (
    AssetError,
    ParseError,
    FormatError,
    ResourceNotFoundError,
    ModelLoadError
)

# Transform
from .transform import RigidTransform

# Skeleton and animation classes
from .bone import Bone
from .track import Track, Keyframe
from .anim import Animation
from .skeleton import Skeleton, read_skeleton

# Mesh and material classes
from .material import Material, RenderPass, MaterialResolver
from .mesh import Mesh, Vertex, read_meshes

# Resources
from .resources import ResourceResolver, DirectoryResources, TextureCache

# Model and loader
from .model import Model, assemble_model
from .loader import load_model, ModelSource

# Define public API
__all__ = [
    # Errors
    'AssetError',
    'ParseError',
    'FormatError',
    'ResourceNotFoundError',
    'ModelLoadError',

    # Transform
    'RigidTransform',

    # Skeleton
    'Bone',
    'Track',
    'Keyframe',
    'Animation',
    'Skeleton',
    'read_skeleton',

    # Mesh
    'Material',
    'RenderPass',
    'MaterialResolver',
    'Mesh',
    'Vertex',
    'read_meshes',

    # Resources
    'ResourceResolver',
    'DirectoryResources',
    'TextureCache',

    # Model
    'Model',
    'assemble_model',
    'load_model',
    'ModelSource',
]

__version__ = '1.0.0'
