# config/resolvers.py
from pathlib import Path
from typing import Optional, Sequence, Tuple, List
from platformdirs import user_log_dir

APP = "traitscore"
EVIDENCE_EXTENSIONS = (".json", ".jsonl")

def default_log_dir() -> Path:
    p = Path(user_log_dir(APP))
    p.mkdir(parents=True, exist_ok=True)
    return p

def resolve_log_dir(file_path: Optional[Path]) -> Path:
    """Directory for log files: next to an explicit log file, else the per-user default."""
    if file_path:
        return Path(file_path).parent
    return default_log_dir()

def resolve_evidence_inputs(
    inputs: Optional[Sequence[str]] = None,
    input_dir: Optional[str] = None,
    *,
    recursive: bool = False,
    extensions: Tuple[str, ...] = EVIDENCE_EXTENSIONS,
) -> Tuple[str, ...]:
    """
    Collect evidence files, one per independent source:
    - explicit ``inputs``: each must exist and carry a known extension.
    - ``input_dir``: every matching file in the directory (optionally recursive).
    Returns a sorted, de-duplicated tuple of absolute paths.
    """
    if inputs and input_dir:
        raise ValueError("Specify either explicit evidence files or input_dir, not both.")

    if input_dir:
        base = Path(input_dir)
        if not base.is_dir():
            raise ValueError(f"--input-dir is not a directory: {base}")
        pattern = "**/*" if recursive else "*"
        found: List[Path] = []
        for p in base.glob(pattern):
            if p.is_file() and p.suffix.lower() in extensions:
                found.append(p.resolve())
        files = tuple(sorted({str(p) for p in found}))
        if not files:
            rec = " recursively" if recursive else ""
            exts = ", ".join(extensions)
            raise ValueError(f"No files with extensions ({exts}) found in {base}{rec}.")
        return files

    if inputs:
        files = []
        for item in inputs:
            p = Path(item)
            if not p.is_file():
                raise ValueError(f"Evidence file not found: {item}")
            if p.suffix.lower() not in extensions:
                raise ValueError(f"Unsupported evidence extension for {item} (allowed: {extensions})")
            files.append(str(p.resolve()))
        return tuple(sorted(set(files)))

    raise ValueError("No evidence provided. Use inputs=... or input_dir=...")
