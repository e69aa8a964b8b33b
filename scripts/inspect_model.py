"""
Load an OGRE mesh/skeleton pair and print a summary of the resulting model.

Usage:
    python scripts/inspect_model.py --mesh robot.mesh --skeleton robot.skeleton
    python scripts/inspect_model.py --config configs/loader_config.yaml \
        --mesh robot --skeleton robot --output robot.json
"""

import argparse
import json
import logging
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ogre_skin.errors import ModelLoadError
from ogre_skin.loader import ModelSource
from ogre_skin.utils.common import save_json
from ogre_skin.utils.config import default_config, load_config


def main():
    parser = argparse.ArgumentParser(description="Inspect an OGRE skinned model")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML config file (defaults are used when omitted)",
    )
    parser.add_argument("--mesh", type=str, required=True, help="Mesh resource name")
    parser.add_argument("--skeleton", type=str, required=True, help="Skeleton resource name")
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write the full model description to this JSON file",
    )
    args = parser.parse_args()

    cfg = load_config(args.config) if args.config else default_config()

    # Setup logging
    logging.basicConfig(
        level=getattr(logging, cfg["log_level"]),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        model = ModelSource.from_config(cfg, args.mesh, args.skeleton).load()
    except ModelLoadError as e:
        logging.error("%s", e)
        return 1

    summary = {
        "meshes": model.get_mesh_count(),
        "vertices": model.get_total_vertex_count(),
        "faces": model.get_total_face_count(),
        "bones": model.skeleton.get_bone_count(),
        "animations": [anim.name for anim in model.skeleton.animations],
        "skinned": model.is_skinned(),
    }
    print(json.dumps(summary, indent=2))

    if args.output:
        save_json(model.to_json(), args.output)
        logging.info("Model description saved to %s", args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
