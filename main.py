import asyncio
import os
import sys

import click
from loguru import logger

from exa_mcp.configuration import create_proxy, create_server, setup_config_store
from exa_mcp.mcp import ExaMCPError


async def serve() -> None:
    async with create_proxy() as exa:
        server = create_server(exa)
        await server.run_stdio()


@click.command()
@click.option("--config-file", default=None, help="YAML configuration file (defaults to CONFIG_FILE or config/config.yml)")
@click.option("--env-file", default=None, help="dotenv file holding EXA_API_KEY (defaults to ENV_FILE or .env)")
@click.option("--data-dir", default=None, help="Folder holding searches.json (overrides storage.folder)")
def main(config_file: str | None, env_file: str | None, data_dir: str | None) -> None:
    """Run the Exa MCP server on stdio."""
    if data_dir:
        os.environ["EXA_MCP_STORAGE_FOLDER"] = data_dir

    try:
        setup_config_store(config_file, env_filename=env_file)
        asyncio.run(serve())
    except KeyboardInterrupt:
        logger.info("Exa MCP server stopped")
    except (ValueError, FileNotFoundError, ExaMCPError) as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()  # pylint: disable=no-value-for-parameter
