# flake8: noqa
# scripts/export_partners.py

import asyncio
import typer

from crm.core.config import settings
from crm.core.database import AsyncSessionLocal, create_db_and_tables
from crm.core.logging import setup_logging
from crm.domains.prt import services as prt_services

cli = typer.Typer()


@cli.command()
def main(
    path: str = typer.Option(
        settings.PARTNER_EXPORT_PATH, '--path', '-p',
        help="Target text file of the export (overwritten)."
    ),
):
    """
    Exports every partner ('P00000001 Name' per line) without the arq worker.
    """
    setup_logging()

    async def run_export() -> int:
        async with AsyncSessionLocal() as db:
            return await prt_services.export_partners(db, path=path)

    count = asyncio.run(run_export())
    print(f"Exported {count} partner(s) to {path}")


@cli.command()
def init_db():
    """
    Creates the database tables of every domain (development setups).
    """
    setup_logging()
    asyncio.run(create_db_and_tables())
    print("Database tables are ready.")


if __name__ == "__main__":
    cli()
