import glob
import os


class SourceLookupError(Exception):
    """Raised when the requested input files cannot be resolved."""
    pass


def collect_html_files(path, *, convert_all=False, pattern="*.html"):
    """Resolve the HTML files a conversion command should process.

    A single path must point at an ``.html`` file.  A directory is only
    accepted together with ``convert_all`` and is expanded with ``pattern``
    (``**`` matches nested folders).

    Args:
        path (str): File or directory to convert.
        convert_all (bool): Allow ``path`` to be a directory.
        pattern (str): Glob applied inside the directory.

    Returns:
        list: Sorted absolute paths of the files to convert.

    Raises:
        SourceLookupError: If the path does not exist, is a directory without
            ``convert_all``, is not an HTML file, or the directory holds no
            matching file.
    """
    if not path or not os.path.exists(path):
        raise SourceLookupError(f"Path not found: {path}")

    if os.path.isdir(path):
        if not convert_all:
            raise SourceLookupError("Path is a directory. Use --all flag to convert all files.")
        files = [
            f for f in glob.glob(os.path.join(path, pattern), recursive=True)
            if os.path.isfile(f)
        ]
        if not files:
            raise SourceLookupError(f"No HTML files found in directory: {path}")
        return sorted(os.path.abspath(f) for f in files)

    if not path.endswith(".html"):
        raise SourceLookupError(f"File must be an HTML file: {path}")
    return [os.path.abspath(path)]


def read_source(file_path):
    """Read a template file as UTF-8 text.

    Raises:
        ValueError: If the file cannot be decoded, with the path for context.
    """
    try:
        with open(file_path, mode="r", encoding="utf-8") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise ValueError(f"Error decoding {file_path}: {e}") from e
