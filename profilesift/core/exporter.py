"""Export utilities for analysis results."""

from pathlib import Path
from datetime import datetime
from typing import TYPE_CHECKING

from profilesift.models.result import AnalysisResult

if TYPE_CHECKING:
    import pandas as pd

try:
    import pandas as pd
    PANDAS_AVAILABLE = True
except ImportError:
    PANDAS_AVAILABLE = False


def to_json(result: AnalysisResult, indent: int = 2) -> str:
    """
    Convert AnalysisResult to JSON string.

    Args:
        result: AnalysisResult to serialize
        indent: JSON indentation level

    Returns:
        JSON string
    """
    return result.model_dump_json(indent=indent)


def to_dict(result: AnalysisResult) -> dict:
    """Convert AnalysisResult to a JSON-compatible dictionary."""
    return result.model_dump(mode="json")


def save_json(
    result: AnalysisResult,
    filepath: str | Path,
    indent: int = 2,
) -> Path:
    """
    Save AnalysisResult to JSON file.

    Args:
        result: AnalysisResult to save
        filepath: Output file path
        indent: JSON indentation level

    Returns:
        Path to saved file
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(result.model_dump_json(indent=indent), encoding="utf-8")
    return path


def save_many_json(
    results: list[AnalysisResult],
    output_dir: str | Path,
    filename_template: str = "{platform}_{username}.json",
) -> list[Path]:
    """
    Save multiple AnalysisResults to individual JSON files.

    Args:
        results: List of AnalysisResults
        output_dir: Directory for output files
        filename_template: Template with {platform} and {username} placeholders

    Returns:
        List of paths to saved files
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    saved = []
    for result in results:
        filename = filename_template.format(
            platform=_safe_name(result.platform),
            username=_safe_name(result.profile.username),
        )
        saved.append(save_json(result, output_path / filename))

    return saved


def _safe_name(value: str) -> str:
    """Make a value usable as a file name component."""
    cleaned = "".join(ch if ch.isalnum() or ch in "-_." else "_" for ch in value)
    return cleaned.strip(".") or "unknown"


def load_json(filepath: str | Path) -> AnalysisResult:
    """Load AnalysisResult from JSON file."""
    path = Path(filepath)
    return AnalysisResult.model_validate_json(path.read_text(encoding="utf-8"))


def merge_results(results: list[AnalysisResult]) -> dict:
    """
    Merge multiple AnalysisResults into a single export-friendly dict.

    Args:
        results: List of AnalysisResults

    Returns:
        Dict with a 'results' array plus metadata
    """
    return {
        "exported_at": datetime.now().isoformat(),
        "results_count": len(results),
        "low_confidence_count": sum(1 for r in results if r.confidence == "low"),
        "results": [to_dict(r) for r in results],
    }


def _check_pandas():
    """Raise ImportError if pandas is not available."""
    if not PANDAS_AVAILABLE:
        raise ImportError(
            "pandas is required for DataFrame export. Install with: pip install pandas"
        )


def _flat_row(result: AnalysisResult) -> dict:
    """Flatten one result into a single table row."""
    metrics = result.profile.model_dump(mode="json")
    flags = metrics.pop("username_flags")
    return {
        "platform": result.platform,
        "confidence": result.confidence,
        "notes": result.notes,
        **metrics,
        **{f"flag_{name}": value for name, value in flags.items()},
    }


def results_to_df(results: list[AnalysisResult]) -> "pd.DataFrame":
    """
    Convert AnalysisResults to a DataFrame with one row per profile.

    Username flags are flattened into ``flag_*`` columns.

    Raises:
        ImportError: If pandas is not installed
    """
    _check_pandas()
    return pd.DataFrame([_flat_row(r) for r in results])


def save_csv(results: list[AnalysisResult], filepath: str | Path) -> Path:
    """
    Save AnalysisResults to a CSV file.

    Raises:
        ImportError: If pandas is not installed
    """
    _check_pandas()

    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    results_to_df(results).to_csv(path, index=False)
    return path
