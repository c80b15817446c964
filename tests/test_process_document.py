from __future__ import annotations

from pathlib import Path

import pytest

from medocr.application.usecases.process_document import process_document
from medocr.domain.pipeline.errors import InvalidInputError, NoTextDetectedError
from medocr.infrastructure.storage.local_disk_adapter import LocalDiskStorageAdapter

from tests.fakes import FakeOCR, FakeStructuring


@pytest.mark.asyncio
async def test_process_document_writes_raw_and_markdown(tmp_path: Path) -> None:
    image = tmp_path / "discharge_note.jpg"
    image.write_bytes(b"img")
    storage = LocalDiskStorageAdapter(base_dir=tmp_path / "out")
    ocr = FakeOCR()
    structuring = FakeStructuring()

    outcome = await process_document(
        image_path=image,
        ocr_client=ocr,
        structuring_client=structuring,
        storage=storage,
        context="clinical_notes",
        languages=["en"],
    )

    raw_path = tmp_path / "out" / "discharge_note-raw.txt"
    md_path = tmp_path / "out" / "discharge_note.md"
    assert outcome.artifacts == {"raw": raw_path, "markdown": md_path}
    assert raw_path.read_text(encoding="utf-8") == f"text of {image}"
    assert md_path.read_text(encoding="utf-8") == f"# text of {image}"
    assert ocr.calls == [(str(image), ["en"])]
    assert structuring.calls == [(f"text of {image}", "clinical_notes", "markdown")]


@pytest.mark.asyncio
async def test_process_document_uses_pre_extracted_text(tmp_path: Path) -> None:
    image = tmp_path / "labs.png"
    (tmp_path / "labs.txt").write_text("Laboratory report", encoding="utf-8")
    storage = LocalDiskStorageAdapter(base_dir=tmp_path / "out")
    ocr = FakeOCR()

    outcome = await process_document(
        image_path=image,
        ocr_client=ocr,
        structuring_client=FakeStructuring(),
        storage=storage,
        use_ocr=False,
        translate_to="ar",
    )

    assert ocr.calls == []
    assert outcome.raw_text == "Laboratory report"
    assert set(outcome.artifacts) == {"markdown"}
    assert not (tmp_path / "out" / "labs-raw.txt").exists()
    assert any("ar" in w for w in outcome.warnings)


@pytest.mark.asyncio
async def test_process_document_skip_structuring(tmp_path: Path) -> None:
    image = tmp_path / "scan.png"
    storage = LocalDiskStorageAdapter(base_dir=tmp_path / "out")
    structuring = FakeStructuring()

    outcome = await process_document(
        image_path=image,
        ocr_client=FakeOCR(),
        structuring_client=structuring,
        storage=storage,
        structure=False,
    )

    assert structuring.calls == []
    assert outcome.structured is None
    assert set(outcome.artifacts) == {"raw"}


@pytest.mark.asyncio
async def test_process_document_errors_propagate(tmp_path: Path) -> None:
    storage = LocalDiskStorageAdapter(base_dir=tmp_path / "out")
    with pytest.raises(InvalidInputError):
        await process_document(
            image_path=tmp_path / "nothing.png",
            ocr_client=FakeOCR(),
            structuring_client=FakeStructuring(),
            storage=storage,
            use_ocr=False,
        )

    image = tmp_path / "blank.png"
    with pytest.raises(NoTextDetectedError):
        await process_document(
            image_path=image,
            ocr_client=FakeOCR(fail_on={str(image)}),
            structuring_client=FakeStructuring(),
            storage=storage,
        )
    assert not (tmp_path / "out" / "blank-raw.txt").exists()
