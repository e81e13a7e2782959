"""Journal export functionality."""

import json
from datetime import datetime
from pathlib import Path

import frontmatter

from .models import Entry


def _prepare(output_path: Path) -> Path:
    output_path = Path(output_path).expanduser()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    return output_path


def export_json(entries: list[Entry], output_path: Path) -> int:
    """Export entries to JSON.

    Returns:
        Number of entries exported
    """
    export_data = {
        "exported_at": datetime.now().isoformat(),
        "count": len(entries),
        "entries": [e.to_dict() for e in entries],
    }

    with open(_prepare(output_path), "w", encoding="utf-8") as f:
        json.dump(export_data, f, indent=2, default=str)

    return len(entries)


def entry_to_post(entry: Entry) -> frontmatter.Post:
    """One entry as a YAML-frontmatter document."""
    post = frontmatter.Post(entry.text)
    post["id"] = entry.id
    post["created"] = entry.created_at.isoformat()
    post["sentiment"] = str(entry.sentiment)
    post["themes"] = list(entry.themes)
    post["word_count"] = entry.word_count
    if entry.emotional_intensity is not None:
        post["emotional_intensity"] = entry.emotional_intensity
    if entry.key_topics:
        post["key_topics"] = list(entry.key_topics)
    if entry.insight_note:
        post["insight"] = entry.insight_note
    return post


def export_markdown(entries: list[Entry], output_path: Path) -> int:
    """Export entries to Markdown, one frontmatter document per entry.

    Returns:
        Number of entries exported
    """
    lines = [
        "# Journal Export",
        "",
        f"Exported: {datetime.now().strftime('%Y-%m-%d %H:%M')}",
        f"Entries: {len(entries)}",
        "",
    ]
    for entry in entries:
        lines.append(frontmatter.dumps(entry_to_post(entry)))
        lines.append("")

    with open(_prepare(output_path), "w", encoding="utf-8") as f:
        f.write("\n".join(lines))

    return len(entries)
