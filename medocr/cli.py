import argparse
import asyncio
import json
import sys
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from pydantic import TypeAdapter, ValidationError

from medocr.application.services.factories import (
    build_ocr_client,
    build_orchestrator,
    build_storage_adapter,
    build_structuring_adapter,
)
from medocr.application.usecases.process_document import process_document
from medocr.core.config import Settings, get_settings
from medocr.core.logging import configure_logging
from medocr.domain.pipeline.errors import InvalidInputError
from medocr.domain.pipeline.models import OcrOptions, PipelineTask

RULE = "-" * 80

_TASKS = TypeAdapter(list[PipelineTask])


def _languages(value: str | None) -> list[str] | None:
    if not value:
        return None
    return [lang.strip() for lang in value.split(",") if lang.strip()]


async def _run_ocr(args: argparse.Namespace, settings: Settings) -> int:
    client = build_ocr_client(settings)
    result = await client.extract_text(args.image, OcrOptions(languages=_languages(args.languages)))

    print("\nOCR Results:")
    print(RULE)
    print(f"Confidence: {result.confidence * 100:.2f}%")
    print(f"Languages: {', '.join(result.detected_languages)}")
    print(f"Processing Time: {result.metadata.processing_time:.3f}s")
    print(f"Text Blocks: {len(result.blocks)}")
    if result.metadata.low_confidence:
        print(f"Warning: confidence below threshold ({settings.OCR_CONFIDENCE_THRESHOLD:.0%})")
    print(RULE)
    print("\nExtracted Text:")
    print(result.text)
    print(RULE)

    if args.output:
        out = Path(args.output)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(result.text, encoding="utf-8")
        print(f"Text saved to: {out}")
    return 0


async def _run_process(args: argparse.Namespace, settings: Settings) -> int:
    storage = build_storage_adapter(Path(args.output), settings)
    outcome = await process_document(
        image_path=Path(args.image),
        ocr_client=build_ocr_client(settings),
        structuring_client=build_structuring_adapter(settings),
        storage=storage,
        context=args.context,
        languages=_languages(args.languages),
        use_ocr=args.ocr,
        structure=args.structure,
        translate_to=args.translate,
    )

    print("\nProcessing Complete!")
    print(RULE)
    print(f"Output directory: {storage.base_dir}")
    for name, path in outcome.artifacts.items():
        print(f"  {name}: {path}")
    if outcome.structured is not None:
        print(f"Document type: {outcome.structured.document_type.value}")
        print(f"Entities: {len(outcome.structured.entities)}")
    for warning in outcome.warnings:
        print(f"Warning: {warning}")
    print(RULE)
    return 0


async def _run_batch(args: argparse.Namespace, settings: Settings) -> int:
    path = Path(args.tasks)
    try:
        tasks = _TASKS.validate_json(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise InvalidInputError(f"Cannot read task file {path}: {e.strerror or e}") from e
    except ValidationError as e:
        raise InvalidInputError(f"Invalid task file {path}: {e.error_count()} error(s)") from e

    results = await build_orchestrator(settings).execute_batch(tasks)
    print(json.dumps([r.model_dump(mode="json") for r in results], ensure_ascii=False, indent=2))
    return 0 if all(r.success for r in results) else 1


async def _run_health(args: argparse.Namespace, settings: Settings) -> int:
    orchestrator = build_orchestrator(settings)
    health = orchestrator.health_check()
    print("Health Check")
    print("=" * 80)
    print(f"\nOrchestrator: {health['status']}")
    print("  Adapters:")
    for adapter, status in health["adapters"].items():
        print(f"    {adapter}: {status}")

    print(f"\nOCR: {build_ocr_client(settings).health_check()['status']}")
    print(f"Structuring: {build_structuring_adapter(settings).health_check()['status']}")

    print("\nConfiguration:")
    print(f"  Environment: {settings.ENV}")
    print(f"  OCR Confidence Threshold: {settings.OCR_CONFIDENCE_THRESHOLD:.0%}")
    print(f"  Languages: {', '.join(settings.ocr_languages)}")
    print(f"  OpenAI Model: {settings.OPENAI_MODEL}")
    return 0


async def _run_config(args: argparse.Namespace, settings: Settings) -> int:
    print(json.dumps(settings.masked(), indent=2))
    return 0


COMMANDS = {
    "ocr": _run_ocr,
    "process": _run_process,
    "batch": _run_batch,
    "health": _run_health,
    "config": _run_config,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="medocr", description="Medical document OCR and structuring pipeline.")
    parser.add_argument("--log-level", default=None, help="Override MEDOCR_LOG_LEVEL (e.g. DEBUG, WARNING)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_ocr = sub.add_parser("ocr", help="Extract text from a medical image")
    p_ocr.add_argument("image", help="Path to the image file")
    p_ocr.add_argument(
        "-l", "--languages", default=None, help="Comma-separated language hints (default: MEDOCR_OCR_LANGUAGES)"
    )
    p_ocr.add_argument("-o", "--output", default=None, help="Write the extracted text to this file")

    p_proc = sub.add_parser("process", help="Run OCR and structuring on a medical image")
    p_proc.add_argument("image", help="Path to the image file")
    p_proc.add_argument(
        "-c",
        "--context",
        default="unknown",
        help="Document context (prescription|lab_results|clinical_notes)",
    )
    p_proc.add_argument("-o", "--output", default=None, help="Output directory (default: MEDOCR_OUTPUT_DIR)")
    p_proc.add_argument("-l", "--languages", default=None, help="Comma-separated language hints")
    p_proc.add_argument("--no-ocr", dest="ocr", action="store_false", help="Use the pre-extracted <image>.txt")
    p_proc.add_argument("--no-structure", dest="structure", action="store_false", help="Skip AI structuring")
    p_proc.add_argument("--translate", default=None, metavar="LANG", help="Translate to language (not implemented)")

    p_batch = sub.add_parser("batch", help="Run a JSON list of pipeline tasks")
    p_batch.add_argument("tasks", help="Path to a JSON file with [{taskId, type, input}, ...]")

    sub.add_parser("health", help="Show orchestrator and adapter status")
    sub.add_parser("config", help="Show the effective configuration (secrets masked)")
    return parser


def main(argv: list[str] | None = None) -> None:
    # Load .env before settings are read
    load_dotenv(find_dotenv(usecwd=True), override=False)

    args = build_parser().parse_args(argv)
    settings = get_settings()
    # Logs go to stderr so command output on stdout stays parseable
    configure_logging(args.log_level or settings.LOG_LEVEL, settings.LOG_JSON, stream=sys.stderr)

    if args.command == "process" and args.output is None:
        args.output = str(settings.OUTPUT_DIR)

    try:
        code = asyncio.run(COMMANDS[args.command](args, settings))
    except KeyboardInterrupt:
        print("Interrupted.")
        sys.exit(130)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)
    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
