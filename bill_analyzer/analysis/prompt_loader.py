from pathlib import Path

from bill_analyzer.analysis.exceptions import BillAnalysisError, BillAnalysisErrorCode

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def _read(path: Path, what: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise BillAnalysisError(
            BillAnalysisErrorCode.ANALYSIS_FAILED, f"Failed to load {what}: {exc}"
        ) from exc


def load_system_prompt(path: Path | None = None) -> str:
    """Load the fixed system instruction describing the extraction task.

    Defaults to the bundled system_prompt.txt.
    """
    return _read(path or _DEFAULT_PROMPT_DIR / "system_prompt.txt", "system prompt").strip()


def load_prompt_template(path: Path | None = None) -> str:
    """Load the user prompt template.

    Args:
        path: Path to the template file. Defaults to the bundled
              user_prompt.txt, which has a ``{json_schema}`` placeholder.

    Raises:
        BillAnalysisError: if the file cannot be read.
    """
    return _read(path or _DEFAULT_PROMPT_DIR / "user_prompt.txt", "prompt template")


def load_json_schema(path: Path | None = None) -> str:
    """Load the JSON schema of the expected answer.

    Defaults to the bundled bill_analysis_schema.json.

    Raises:
        BillAnalysisError: if the file cannot be read.
    """
    return _read(path or _DEFAULT_PROMPT_DIR / "bill_analysis_schema.json", "JSON schema")
