# ABOUTME: Command-line interface printing the info report of a 3D asset file
# ABOUTME: Maps category switches to ReportConfig and failures to the exit code

import argparse
import sys

from .config import ReportConfig
from .driver import ReportDriver
from .trimesh_source import TrimeshSource
from .utils.logging_utils import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='scene-info',
        description='Print scenes, objects, materials, meshes, textures and images of a 3D asset',
        epilog="""
Examples:
  # Everything in the file
  scene-info model.glb --info

  # Only meshes, with per-attribute bounds
  scene-info model.glb --info-meshes --bounds

  # Scene hierarchy plus object listing, without colors
  scene-info model.glb --info-scenes --info-objects --color off
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    # Required arguments
    parser.add_argument('input', type=str,
                        help='Input file (.glb, .gltf, .obj, .ply, .stl, ...)')

    # Category selection, nothing selected means everything
    parser.add_argument('--info', action='store_true',
                        help='Print info about everything in the file (default)')
    parser.add_argument('--info-scenes', action='store_true',
                        help='Print info about scenes')
    parser.add_argument('--info-objects', action='store_true',
                        help='Print info about objects')
    parser.add_argument('--info-animations', action='store_true',
                        help='Print info about animations')
    parser.add_argument('--info-skins', action='store_true',
                        help='Print info about 2D and 3D skins')
    parser.add_argument('--info-lights', action='store_true',
                        help='Print info about lights')
    parser.add_argument('--info-materials', action='store_true',
                        help='Print info about materials')
    parser.add_argument('--info-meshes', action='store_true',
                        help='Print info about meshes')
    parser.add_argument('--info-textures', action='store_true',
                        help='Print info about textures')
    parser.add_argument('--info-images', action='store_true',
                        help='Print info about 1D, 2D and 3D images')

    # Optional arguments
    parser.add_argument('--bounds', action='store_true',
                        help='Calculate bounds of mesh attributes (goes through all vertex data)')
    parser.add_argument('--color', type=str, default='auto',
                        choices=['auto', 'on', 'off'],
                        help='Colored output. Default: auto (only when printing to a terminal)')
    parser.add_argument('--profile', action='store_true',
                        help='Print a timing breakdown of the report')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable verbose logging (DEBUG level)')
    parser.add_argument('--quiet', action='store_true',
                        help='Quiet mode - only show warnings and errors')
    return parser


def config_from_args(args: argparse.Namespace) -> ReportConfig:
    """Create a ReportConfig from parsed arguments. --info turns on every category."""
    everything = args.info
    return ReportConfig(
        scenes=args.info_scenes or everything,
        objects=args.info_objects or everything,
        animations=args.info_animations or everything,
        skins=args.info_skins or everything,
        lights=args.info_lights or everything,
        materials=args.info_materials or everything,
        meshes=args.info_meshes or everything,
        textures=args.info_textures or everything,
        images=args.info_images or everything,
        compute_bounds=args.bounds,
        color=args.color
    )


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # Setup logging
    logger = setup_logging(verbose=args.verbose, quiet=args.quiet,
                           color=args.color == 'on' or (args.color == 'auto' and sys.stderr.isatty()))

    try:
        config = config_from_args(args)
        source = TrimeshSource.load(args.input)

        driver = ReportDriver(source, config, sys.stdout)
        failed = driver.run()

        if args.profile:
            logger.info("")
            logger.info("Timing breakdown:")
            for stats in driver.timing_stats:
                for line in stats.format_tree(driver.elapsed).split('\n'):
                    logger.info("%s", line)

        if failed:
            logger.warning("Some records could not be retrieved")
            return 1
        return 0

    except FileNotFoundError as e:
        logger.error("File not found: %s", e)
        return 1
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 1
    except Exception as e:
        logger.error("Report failed: %s", e)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
