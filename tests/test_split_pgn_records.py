import unittest
from pathlib import Path

from pgnvault.split_pgn_records import RECORD_SEPARATOR, split_pgn_records

FIXTURE_PATH = Path(__file__).resolve().parent / "fixtures" / "chesscom_2024_06.pgn"


def _record(white: str, black: str) -> str:
    return (
        f'[White "{white}"]\n[Black "{black}"]\n'
        '[UTCDate "2024.06.01"]\n[UTCTime "10:00:00"]\n\n1. e4 e5 *'
    )


class SplitPgnRecordsTests(unittest.TestCase):
    def test_fixture_holds_three_games(self) -> None:
        records = split_pgn_records(FIXTURE_PATH.read_text())

        self.assertEqual(len(records), 3)
        self.assertTrue(all(record.startswith('[Event "Live Chess"]') for record in records))
        self.assertTrue(records[0].endswith("1-0"))

    def test_n_records_yield_n_games(self) -> None:
        for count in range(1, 6):
            records = [_record(f"w{i}", f"b{i}") for i in range(count)]
            with self.subTest(count=count):
                blob = RECORD_SEPARATOR.join(records) + RECORD_SEPARATOR
                self.assertEqual(split_pgn_records(blob), records)

    def test_trailing_whitespace_partition_is_dropped(self) -> None:
        blob = _record("a", "b") + "\n\n\n  \n\n\n"

        self.assertEqual(split_pgn_records(blob), [_record("a", "b")])

    def test_empty_blob_has_no_records(self) -> None:
        self.assertEqual(split_pgn_records(""), [])
        self.assertEqual(split_pgn_records("\n\n\n\n"), [])

    def test_single_blank_line_does_not_split(self) -> None:
        record = _record("a", "b")

        self.assertEqual(split_pgn_records(record), [record])

    def test_resplitting_a_record_is_identity(self) -> None:
        for record in split_pgn_records(FIXTURE_PATH.read_text()):
            self.assertEqual(split_pgn_records(record), [record])

    def test_crlf_blob_is_split(self) -> None:
        blob = (_record("a", "b") + RECORD_SEPARATOR + _record("c", "d")).replace("\n", "\r\n")

        self.assertEqual(split_pgn_records(blob), [_record("a", "b"), _record("c", "d")])


if __name__ == "__main__":
    unittest.main()
