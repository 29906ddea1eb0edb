import json
from typing import Any


def format_output(data: Any, output_format: str = "plain") -> str:
    if output_format == "json":
        return json.dumps(data, indent=2)
    return format_plain(data)


def format_plain(data: Any) -> str:
    if data is None:
        return ""

    if isinstance(data, str):
        return data

    if isinstance(data, dict):
        if "error" in data:
            return f"Error: {data['error']}"

        if "results" in data:
            return format_file_results(data["results"], data.get("action", "Updated"))

        if "patterns" in data:
            return format_patterns(data["patterns"])

        return json.dumps(data, indent=2)

    if isinstance(data, list):
        if not data:
            return "No results"
        return "\n".join(format_plain(item) for item in data)

    return str(data)


def format_file_results(results: list[dict], action: str) -> str:
    if not results:
        return "No files processed"

    lines = []
    for result in results:
        path = result["path"]
        if result.get("skipped"):
            lines.append(f"Skipped {path} ({result['skipped']})")
        elif "diff" in result:
            if result["diff"]:
                lines.append(result["diff"].rstrip("\n"))
            else:
                lines.append(f"Unchanged {path}")
        elif result.get("changed"):
            lines.append(f"{action} {path}")
        else:
            lines.append(f"Unchanged {path}")

    return "\n".join(lines)


def format_patterns(patterns: list[str]) -> str:
    if not patterns:
        return "No protected patterns configured"
    return "Protected patterns:\n" + "\n".join(f"  {p}" for p in patterns)
