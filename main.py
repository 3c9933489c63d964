"""
Entry point for the universal block converter.

Usage:
  python main.py html2blocks src/parts/header.html
  python main.py html2blocks src/parts --all
  python main.py blocks2html parts --all --output src/parts
  python main.py pattern src/patterns -o patterns --namespace mytheme
"""

import argparse
import sys

from universal_blocks.conversion_tool import ThemeConversionTool

CONFIG_FILE = "config/conversion_config.json"


def _csv_list(value):
    return [part.strip() for part in value.split(",") if part.strip()]


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Convert block theme templates between HTML and WordPress block markup."
    )
    parser.add_argument(
        "--config",
        default=CONFIG_FILE,
        help="Path to the JSON configuration file (default: config/conversion_config.json)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("html2blocks", "Convert HTML files to block markup"),
        ("blocks2html", "Convert block markup files to HTML"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("path", help="File or directory, relative to the theme")
        cmd.add_argument("--all", action="store_true", help="Convert all files in the directory")
        cmd.add_argument("--output", default=None, help="Output directory, relative to the theme")

    pattern = sub.add_parser("pattern", help="Convert HTML files to WordPress PHP pattern files")
    pattern.add_argument("input", help="Input HTML file or directory")
    pattern.add_argument("-o", "--output", default="./patterns", help="Output directory (default: ./patterns)")
    pattern.add_argument("-p", "--pattern", default=None, help="Glob pattern for HTML files (default: **/*.html)")
    pattern.add_argument("--namespace", default=None, help='Pattern namespace (e.g., "mytheme")')
    pattern.add_argument("--categories", type=_csv_list, default=None, help="Pattern categories (comma-separated)")
    pattern.add_argument("--keywords", type=_csv_list, default=None, help="Pattern keywords (comma-separated)")
    pattern.add_argument("--description", default=None, help="Pattern description")
    pattern.add_argument("--viewport-width", type=int, default=None, help="Viewport width for pattern preview")

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """
    Main function to run the converter.  Returns the process exit code.
    """
    args = parse_args(argv)
    tool = ThemeConversionTool(config_file=args.config)
    tool.log_message(f"Theme directory: {tool.theme_dir}", level="DEBUG")

    if args.command == "html2blocks":
        converted = tool.html_to_blocks(args.path, convert_all=args.all, output_dir=args.output)
    elif args.command == "blocks2html":
        converted = tool.blocks_to_html(args.path, convert_all=args.all, output_dir=args.output)
    else:
        converted = tool.html_to_patterns(
            args.input,
            output_dir=args.output,
            glob_pattern=args.pattern,
            namespace=args.namespace,
            categories=args.categories,
            keywords=args.keywords,
            description=args.description,
            viewport_width=args.viewport_width,
        )

    tool.write_manifest()

    if tool.failed or not converted:
        tool.log_message(f"{tool.failed} file(s) failed to convert.", level="ERROR")
        return 1
    tool.log_message("Conversion finished.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
