"""End-to-end pipeline behavior over in-memory documents."""

import json

import pytest

from pathsift.core.types import ExtractedPath, Position
from pathsift.documents import TextDocument
from pathsift.exceptions import SafetyThresholdError
from pathsift.extraction import FileType
from pathsift.pipeline import (
    MESSAGE_NO_PATHS,
    MESSAGE_UNSAFE,
    process_document,
    process_document_sync,
    process_documents,
    screen_paths,
)
from pathsift.reporting import OutputChannelLogger, create_error_handler
from pathsift.safety import MESSAGE_OVERRIDE_APPROVED, SafetyCheckOptions

pytestmark = pytest.mark.unit

SOURCE = (
    "import { Button } from './components/Button'\n"
    "const util = require('../lib/util')\n"
    "import secrets from '/etc/passwd'\n"
    "import lib from 'https://cdn.example.com/m.js'\n"
)


@pytest.fixture
def ts_document():
    return TextDocument(SOURCE, "typescript", "app.ts")


def padded_json(path: str, size: int = 2000) -> str:
    return json.dumps({"a": path, "pad": "y" * size})


class TestScreenPaths:
    def test_accepts_normalized_and_reports_rejections(self):
        accepted, rejected = screen_paths(
            [
                ExtractedPath("src\\a.ts", 1, 1),
                ExtractedPath("../up", 2, 5),
                ExtractedPath("/etc/hosts"),
            ]
        )
        assert accepted == ["src/a.ts"]
        assert [r.message for r in rejected] == [
            "../up: Path contains traversal sequence (..)",
            f"/etc/hosts: {MESSAGE_UNSAFE}",
        ]
        assert rejected[0].position == Position(2, 5)
        assert rejected[1].position is None
        assert all(r.category == "validation" for r in rejected)
        assert all(r.recovery_action == "skip" for r in rejected)


class TestProcessDocument:
    @pytest.mark.asyncio
    async def test_accepted_paths_and_rejection_warnings(
        self, ts_document, config, notifier, fake_stat
    ):
        result = await process_document(
            ts_document, config, notifier=notifier, stat=fake_stat()
        )

        assert result.success
        assert result.file_type is FileType.TYPESCRIPT
        assert result.extraction.values == [
            "./components/Button",
            "../lib/util",
            "/etc/passwd",
            "https://cdn.example.com/m.js",
        ]
        assert result.paths == ("./components/Button", "https://cdn.example.com/m.js")
        assert [w.position.line for w in result.warnings] == [2, 3]
        assert [v.exists for v in result.validation] == [False, True]
        assert result.resolution is None
        assert notifier.calls == []

    @pytest.mark.asyncio
    async def test_without_validation_every_candidate_is_kept(
        self, ts_document, config, notifier
    ):
        result = await process_document(
            ts_document, config, notifier=notifier, validate=False
        )
        assert len(result.paths) == 4
        assert result.warnings == ()
        assert result.validation == ()

    @pytest.mark.asyncio
    async def test_unsupported_format_stops_before_safety(self, config, notifier):
        doc = TextDocument("print('x')", "python", "script.py")
        result = await process_document(doc, config, notifier=notifier)

        assert not result.success
        assert result.safety is None
        assert result.file_type is FileType.UNKNOWN
        assert result.extraction.errors[0].category == "format"
        assert notifier.kinds() == ["info"]
        assert "not supported for python files" in notifier.calls[0][1]

    @pytest.mark.asyncio
    async def test_no_paths_notifies(self, config, notifier):
        doc = TextDocument('{"a": 1}', "json", "data.json")
        result = await process_document(doc, config, notifier=notifier)

        assert result.success
        assert result.paths == ()
        assert notifier.calls == [("info", MESSAGE_NO_PATHS, None)]

    @pytest.mark.asyncio
    async def test_safety_block_stops_the_run(self, make_frozen_config, notifier):
        config = make_frozen_config(safety_file_size_warn_bytes=1000)
        doc = TextDocument(padded_json("./x"), "json", "big.json")

        result = await process_document(doc, config, notifier=notifier)

        assert result.blocked
        assert not result.success
        assert result.paths == ()
        assert result.safety.error.context["fileName"] == "big.json"
        assert notifier.kinds() == ["warning"]

    @pytest.mark.asyncio
    async def test_safety_block_can_raise(self, make_frozen_config, notifier):
        config = make_frozen_config(safety_file_size_warn_bytes=1000)
        doc = TextDocument(padded_json("./x"), "json", "big.json")

        with pytest.raises(SafetyThresholdError, match="Safety threshold exceeded"):
            await process_document(doc, config, notifier=notifier, raise_on_block=True)

    @pytest.mark.asyncio
    async def test_confirmed_override_proceeds(
        self, make_frozen_config, notifier, fake_stat
    ):
        config = make_frozen_config(safety_file_size_warn_bytes=1000)
        doc = TextDocument(padded_json("./x"), "json", "big.json")

        result = await process_document(
            doc, config, notifier=notifier, stat=fake_stat(), confirm=lambda _m: True
        )

        assert not result.blocked
        assert result.safety.message == MESSAGE_OVERRIDE_APPROVED
        assert result.paths == ("./x",)

    @pytest.mark.asyncio
    async def test_soft_warnings_reach_the_error_handler(
        self, make_frozen_config, notifier, sink, fake_stat
    ):
        config = make_frozen_config(safety_large_output_lines_threshold=100)
        handler = create_error_handler(
            logger=OutputChannelLogger(sink),
            notifier=notifier,
            notifications_level="important",
        )
        doc = TextDocument("\n".join(["name,./a"] * 150), "csv", "big.csv")

        result = await process_document(
            doc, config, notifier=notifier, error_handler=handler, stat=fake_stat()
        )

        assert result.success
        assert result.safety.warnings
        assert notifier.kinds() == ["warning"]
        assert "Large file detected: 150 lines" in notifier.calls[0][1]

    @pytest.mark.asyncio
    async def test_progress_is_reported_on_request(self, config, notifier, fake_stat):
        doc = TextDocument("./a", "csv", "a.csv")
        await process_document(
            doc,
            config,
            notifier=notifier,
            stat=fake_stat(),
            safety_options=SafetyCheckOptions(show_progress=True),
        )
        assert notifier.kinds()[0] == "progress"

    @pytest.mark.asyncio
    async def test_dedupe(self, make_frozen_config, notifier, fake_stat):
        config = make_frozen_config(dedupe_enabled=True)
        doc = TextDocument("./a,./b\n./a,./c\n", "csv", "x.csv")

        result = await process_document(doc, config, notifier=notifier, stat=fake_stat())

        assert result.paths == ("./a", "./b", "./c")
        assert len(result.validation) == 4

    @pytest.mark.asyncio
    async def test_symlink_resolution(self, make_frozen_config, notifier, tmp_path):
        target = tmp_path / "target.txt"
        target.write_text("x")
        link = tmp_path / "link.txt"
        link.symlink_to(target)
        missing = tmp_path / "missing.txt"
        doc = TextDocument(
            json.dumps({"a": str(link), "b": str(missing)}), "json", "cfg.json"
        )
        config = make_frozen_config(resolve_symlinks=True)

        result = await process_document(doc, config, notifier=notifier)

        assert result.paths == (str(target.resolve()), str(missing))
        assert result.resolution.resolved == 1
        assert result.resolution.fallback == 1
        assert result.validation[0].resolved_path == str(target.resolve())


class TestBatches:
    @pytest.mark.asyncio
    async def test_max_items_stops_early(self, config, notifier, fake_stat):
        docs = [TextDocument(f"./{i}", "csv", f"{i}.csv") for i in range(3)]
        results = await process_documents(
            docs, config, max_items=1, notifier=notifier, stat=fake_stat()
        )
        assert [r.document for r in results] == ["0.csv"]

    @pytest.mark.asyncio
    async def test_many_documents_warning(self, make_frozen_config, notifier, fake_stat):
        config = make_frozen_config(safety_many_documents_threshold=1)
        docs = [TextDocument("./a", "csv", "a.csv"), TextDocument("./b", "csv", "b.csv")]

        results = await process_documents(
            docs, config, notifier=notifier, stat=fake_stat()
        )

        assert len(results) == 2
        assert ("warning", "Processing 2 documents (threshold: 1)", None) in notifier.calls


def test_process_document_sync(config, fake_stat):
    doc = TextDocument("A=./data\n", "dotenv", ".env")
    result = process_document_sync(doc, config, stat=fake_stat())
    assert result.paths == ("./data",)
