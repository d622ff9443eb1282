import logging
import os
import pathlib
import sys
from typing import Any

import yaml

import click
from jsxl10n import catalog, parser
from jsxl10n.classes import ExtractOptions
from jsxl10n.errors import Jsxl10nError

logger = logging.getLogger(__name__)


def load_config(config_folder: str) -> dict[str, Any]:
    config_file_path = os.path.abspath(f"{config_folder}/config.yml")
    try:
        with open(config_file_path, "r") as file:
            return yaml.safe_load(file) or {}
    except FileNotFoundError:
        logger.debug(f"No configuration file at {config_file_path}")
    except yaml.YAMLError as exc:
        logger.error(sys._getframe().f_code.co_name + " " + str(exc))
        sys.exit(1)
    return {}


def setup_logging(config: dict[str, Any]) -> None:
    logging_cfg = config.get("logging") or {}
    logging.basicConfig(
        level=logging.getLevelName(logging_cfg.get("level", "INFO")),
        format=logging_cfg.get("format", "%(asctime)s %(levelname)s %(message)s"),
        datefmt=logging_cfg.get("datefmt"),
    )


@click.group()
@click.version_option()
def cli() -> None:
    pass


@cli.command("extract")
@click.option("--config-folder", default="config", help="Configuration folder path.")
@click.option("-o", "--output", help="Catalog file name, '-' for stdout.")
@click.option("-p", "--output-dir", help="Directory of the catalog file.")
@click.option(
    "-j", "--join-existing", is_flag=True, help="Merge into an existing catalog."
)
@click.option(
    "-k", "--keyword", multiple=True, help="Additional translation function name."
)
@click.option("-c", "--add-comments", help="Tag marking comments for translators.")
@click.option(
    "-s", "--sanity", is_flag=True, help="Fail on calls with non-literal arguments."
)
@click.option("--project-id-version", help="Project name and version for new catalogs.")
@click.option(
    "--msgid-bugs-address", "report_bugs_to", help="Report-Msgid-Bugs-To header."
)
@click.argument(
    "files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False)
)
def extract(
    config_folder: str,
    output: str | None,
    output_dir: str | None,
    join_existing: bool,
    keyword: tuple[str, ...],
    add_comments: str | None,
    sanity: bool,
    project_id_version: str | None,
    report_bugs_to: str | None,
    files: tuple[str, ...],
) -> None:
    config = load_config(config_folder)
    setup_logging(config)
    defaults = config.get("extract") or {}

    options = ExtractOptions(
        join_existing=join_existing,
        output=output or defaults.get("output", "messages.po"),
        output_dir=output_dir or defaults.get("output_dir", ""),
        keyword=list(keyword) or defaults.get("keyword"),
        add_comments=add_comments or defaults.get("add_comments"),
        sanity=sanity or defaults.get("sanity", False),
        project_id_version=project_id_version or defaults.get("project_id_version"),
        report_bugs_to=report_bugs_to or defaults.get("report_bugs_to"),
    )

    sources = {file: pathlib.Path(file).read_text("utf-8") for file in files}

    try:
        result = parser.run(sources, options)
    except Jsxl10nError as ex:
        logger.error(str(ex))
        sys.exit(1)

    if options.output == "-":
        click.echo(catalog.compile_catalog(result))
    else:
        catalog.save_catalog(
            result, os.path.join(options.output_dir or "", options.output)
        )
