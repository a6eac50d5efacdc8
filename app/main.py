import argparse
import mimetypes
import sys
from dataclasses import dataclass
from pathlib import Path

from app.config.settings import Settings
from app.database.connection import close_pool, init_pool
from app.database.repositories.document_repository import DocumentRepository
from app.database.repositories.processing_result_repository import (
    ProcessingResultRepository,
)
from app.extraction.orchestrator import ExtractionOrchestrator
from app.extraction.registry import build_registry
from app.ingestion.service import IngestionService
from app.ingestion.validator import FileValidator
from app.logging.logger import Log
from app.ocr.factory import OcrProviderFactory
from app.storage.file_store import LocalFileStore
from app.worker.extraction_queue import ExtractionQueue
from app.worker.job_runner import ExtractionJobRunner


@dataclass
class Application:
    ingestion: IngestionService
    queue: ExtractionQueue
    orchestrator: ExtractionOrchestrator
    result_repo: ProcessingResultRepository

    def shutdown(self) -> None:
        self.queue.shutdown(wait=True)
        self.orchestrator.shutdown()


def build_application(settings: Settings) -> Application:
    """Build the ingestion service and extraction workers with all adapters."""
    ocr_provider = OcrProviderFactory.create(settings)
    registry = build_registry(settings, ocr_provider)
    orchestrator = ExtractionOrchestrator(registry, settings.extraction_max_workers)

    file_store = LocalFileStore(files_root=settings.files_root)
    doc_repo = DocumentRepository()
    result_repo = ProcessingResultRepository()

    job_runner = ExtractionJobRunner(orchestrator, file_store, doc_repo, result_repo, settings)
    queue = ExtractionQueue(
        job_runner.run,
        max_workers=settings.extraction_max_workers,
        queue_limit=settings.extraction_queue_limit,
    )
    ingestion = IngestionService(
        FileValidator(settings.max_upload_size_bytes), file_store, doc_repo, queue
    )
    return Application(ingestion, queue, orchestrator, result_repo)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="app.main", description="Document ingestion worker")
    commands = parser.add_subparsers(dest="command", required=True)

    ingest = commands.add_parser("ingest", help="ingest a file and wait for extraction")
    ingest.add_argument("path", type=Path)
    ingest.add_argument("--owner", required=True, help="owner id of the document")
    ingest.add_argument("--content-type", help="declared content type (guessed if omitted)")

    resubmit = commands.add_parser("resubmit", help="re-queue a document for extraction")
    resubmit.add_argument("document_id")
    return parser


def _print_outcome(app: Application, document_id: str) -> None:
    result = app.result_repo.find_latest_for_document(document_id)
    if result is None:
        print(f"Document {document_id}: no processing result")
        return
    status = "ok" if result.succeeded else f"failed: {result.error_message}"
    print(
        f"Document {document_id}: {status} "
        f"({result.processing_type}, confidence {result.confidence_score:.2f}, "
        f"{result.processing_time_ms}ms)"
    )
    if result.extracted_text:
        print(result.extracted_text)


def main(argv: list[str] | None = None) -> int:
    """Entry point: settings -> logging -> pool -> dependencies -> command."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    app = build_application(settings)
    try:
        if args.command == "ingest":
            content_type = args.content_type or mimetypes.guess_type(args.path.name)[0]
            document = app.ingestion.ingest(
                args.owner,
                args.path.read_bytes(),
                args.path.name,
                content_type or "application/octet-stream",
            )
        else:
            document = app.ingestion.resubmit(args.document_id)
        print(f"Document {document.id}: {document.status.value}")
        # Drains the queue, so the scheduled job has finished.
        app.shutdown()
        _print_outcome(app, document.id)
    finally:
        app.shutdown()
        close_pool()
    return 0


if __name__ == "__main__":
    sys.exit(main())
