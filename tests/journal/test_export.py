"""Tests for journal export functionality."""

import json

import frontmatter

from journal.export import entry_to_post, export_json, export_markdown


class TestExportJSON:
    def test_export_json_all(self, tmp_path, sample_entries):
        out = tmp_path / "export.json"
        count = export_json(sample_entries, out)
        assert count == 3

        data = json.loads(out.read_text())
        assert data["count"] == 3
        assert "exported_at" in data
        assert [e["id"] for e in data["entries"]] == [e.id for e in sample_entries]
        assert data["entries"][0]["content"].startswith("Great day at work")

    def test_export_json_creates_parent_dirs(self, tmp_path, sample_entries):
        out = tmp_path / "sub" / "dir" / "export.json"
        assert export_json(sample_entries, out) == 3
        assert out.exists()

    def test_export_json_empty(self, tmp_path):
        out = tmp_path / "empty.json"
        assert export_json([], out) == 0
        assert json.loads(out.read_text())["entries"] == []


class TestExportMarkdown:
    def test_entry_to_post(self, sample_entries):
        post = entry_to_post(sample_entries[1])
        assert post.content == sample_entries[1].text
        assert post["sentiment"] == "mixed"
        assert post["themes"] == ["family", "stress"]
        assert "insight" not in post.metadata

    def test_export_markdown(self, tmp_path, sample_entries):
        out = tmp_path / "export.md"
        count = export_markdown(sample_entries, out)
        assert count == 3

        content = out.read_text()
        assert content.startswith("# Journal Export")
        assert "Entries: 3" in content
        for entry in sample_entries:
            assert entry.text in content

    def test_frontmatter_roundtrip_of_one_document(self, sample_entries):
        text = frontmatter.dumps(entry_to_post(sample_entries[0]))
        post = frontmatter.loads(text)
        assert post["id"] == sample_entries[0].id
        assert post["word_count"] == sample_entries[0].word_count
