"""Document download runner.

Fetches a document from the archive API and saves its ZIP archive locally.

Usage:
    python -m services.document_download.document_download <document_id> [--output-dir DIR]
"""

import argparse
import asyncio
import sys
from pathlib import Path

from services.document_download.DocumentDownloader import DocumentDownloader
from services.document_download.DownloadNotifier import DownloadNotifier
from services.document_download.models import DownloadNotification
from shared.clients.archive.api.ArchiveClientApi import ArchiveClientApi
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Download all papers of an archived document as one ZIP file.")
    parser.add_argument("document_id", help="ID of the document to download")
    parser.add_argument("--output-dir", default=".", help="directory the archive is saved into (default: current directory)")
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    """Run one download. Returns the process exit code."""
    args = _parse_args(argv)
    logger = setup_logging()
    config = HelperConfig(logger=logger)

    notifier = DownloadNotifier(helper_config=config)

    def log_notification(notification: DownloadNotification) -> None:
        if notification.kind == "success":
            logger.info("%s: %s", notification.message, notification.path, color="green")
        elif notification.kind == "empty_document":
            logger.warning("%s (%s)", notification.message, notification.document_id, color="yellow")
        else:
            logger.error("%s (%s)", notification.message, notification.document_id, color="red")

    notifier.subscribe(log_notification)

    async with ArchiveClientApi(helper_config=config) as archive_client:
        # the paper list drives the local empty-document check
        try:
            document = await archive_client.do_fetch_document(args.document_id)
        except Exception as e:
            logger.error(f"Could not fetch document {args.document_id}: {e}. Aborting.")
            return 1

        downloader = DocumentDownloader(
            helper_config=config,
            archive_client=archive_client,
            notifier=notifier,
        )
        outcome = await downloader.do_download(
            document_id=document.id,
            title=document.title,
            papers=document.papers,
            target_dir=Path(args.output_dir),
        )
        return 0 if outcome.success else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
