"""Common utility functions for the project."""

import json
import re
from pathlib import Path
from typing import Dict, Any, Union


def save_json(data: Dict[str, Any], filepath: Union[str, Path], indent: int = 2) -> None:
    """Save data to JSON file.
    
    Args:
        data: Dictionary to save
        filepath: Path to output JSON file
        indent: Indentation level for pretty printing
    """
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=indent, ensure_ascii=False)


def strip_filename(filename: str) -> str:
    """Reduce a file reference to the lowercase basename resources are keyed by.
    
    Args:
        filename: File name, optionally with directories and extensions
        
    Returns:
        Lowercase name without directories or anything after the first dot,
        e.g. ``Textures\\Skin.Diffuse.PNG`` -> ``skin``
    """
    basename = re.split(r'[/\\]', filename.lower())[-1]
    return basename.split('.', 1)[0]
