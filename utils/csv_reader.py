"""CSV test data loader: header row as keys, values trimmed, blank lines skipped."""

import csv
import os

import playwright_config as cfg


class CsvReadError(Exception):
    pass


def read_csv(file_path):
    """
    Reads a CSV file into a list of dicts.

    Raises:
        CsvReadError: If the file is missing or cannot be parsed.
    """
    try:
        with open(file_path, "r", encoding="utf-8-sig", newline="") as fh:
            reader = csv.DictReader(fh, skipinitialspace=True)
            if reader.fieldnames is None:
                return []
            headers = [h.strip() for h in reader.fieldnames]
            reader.fieldnames = headers
            records = []
            for row in reader:
                values = {k: (v or "").strip() for k, v in row.items() if k is not None}
                if not any(values.values()):
                    continue
                records.append(values)
            return records
    except (OSError, csv.Error, UnicodeDecodeError) as e:
        raise CsvReadError(f"Failed to read CSV {file_path}: {e}") from e


def data_file(name):
    """Path of a file under the suite's test data directory."""
    root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(root, cfg.TEST_DATA_DIR, name)

