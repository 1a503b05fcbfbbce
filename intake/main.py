import argparse
import json
import mimetypes
import sys
from collections.abc import Sequence
from pathlib import Path

from intake.config.settings import Settings
from intake.database.connection import close_pool, init_pool
from intake.documents.exceptions import PreconditionError
from intake.documents.models import UploadedFile
from intake.documents.service import build_intake_service
from intake.logging.logger import Log


def load_uploaded_file(path: Path) -> UploadedFile:
    """Read a file from disk into an UploadedFile, guessing its MIME type."""
    content = path.read_bytes()
    mime_type, _ = mimetypes.guess_type(path.name)
    return UploadedFile(
        content=content,
        filename=path.name,
        mime_type=mime_type or "application/octet-stream",
        size_bytes=len(content),
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="intake", description="Upload provider documents for a business."
    )
    parser.add_argument("--user-id", required=True)
    parser.add_argument("--business-id", required=True)
    parser.add_argument(
        "--mappings",
        default="",
        help='JSON object of filename to document type, e.g. {"id.pdf": "drivers_license"}',
    )
    parser.add_argument("files", nargs="+", type=Path)
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point: settings -> logging -> pool -> intake service -> JSON result."""
    args = parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    files = [load_uploaded_file(path) for path in args.files]
    init_pool(settings)

    try:
        service = build_intake_service(settings)
        result = service.handle(args.user_id, args.business_id, files, args.mappings)
    except PreconditionError as exc:
        Log.error(f"Intake rejected: {exc}")
        print(json.dumps({"error": str(exc)}))
        return 1
    finally:
        close_pool()

    print(json.dumps(result.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
