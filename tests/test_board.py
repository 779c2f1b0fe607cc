import unittest

from sudokugen.core.constants import BoardSize, RegionKind
from sudokugen.core.exceptions import BoardParseError
from sudokugen.core.models import CellLoc, Region, region_cells
from sudokugen.engine.board import Board
from sudokugen.engine.validator import BoardValidator, find_conflicts
from sudokugen.utils.pretty import format_board


PUZZLE = "...4..87.4.3......2....3..9..62....7...9.6...3.9.8...........4.8725........72.6.."
SOLUTION = "695412873413879526287653419146235987728946135359187264561398742872564391934721658"


class CellLocTests(unittest.TestCase):
    def test_line_col_square(self) -> None:
        cell = CellLoc.at(4, 7, 3)
        self.assertEqual(cell.idx, 43)
        self.assertEqual(cell.line, 4)
        self.assertEqual(cell.col, 7)
        self.assertEqual(cell.square, 5)
        self.assertEqual(str(cell), "(4,7)")

    def test_region_iteration_has_side_cells(self) -> None:
        cell = CellLoc.at(2, 5, 3)
        self.assertEqual([c.idx for c in cell.iter_line()], list(range(18, 27)))
        self.assertEqual([c.idx for c in cell.iter_col()], [5 + 9 * line for line in range(9)])
        self.assertEqual(
            [c.idx for c in cell.iter_square()],
            [3, 4, 5, 12, 13, 14, 21, 22, 23],
        )

    def test_peers_exclude_cell_and_duplicates(self) -> None:
        cell = CellLoc.at(0, 0, 3)
        peers = cell.peers()
        self.assertEqual(len(peers), 20)
        self.assertNotIn(cell, peers)
        self.assertEqual(len(set(peers)), 20)

    def test_regions(self) -> None:
        cell = CellLoc.at(3, 1, 2)
        self.assertEqual(
            cell.regions(),
            (
                Region(RegionKind.LINE, 3),
                Region(RegionKind.COLUMN, 1),
                Region(RegionKind.SQUARE, 2),
            ),
        )

    def test_out_of_range_is_index_error(self) -> None:
        with self.assertRaises(IndexError):
            CellLoc.at(9, 0, 3)
        with self.assertRaises(IndexError):
            region_cells(Region(RegionKind.LINE, 4), 2)


class BoardTests(unittest.TestCase):
    def test_new_board_is_empty(self) -> None:
        board = Board.new(BoardSize.NINE_BY_NINE)
        self.assertEqual(len(list(board.iter_cells())), 81)
        self.assertTrue(all(board.get(cell) is None for cell in board.iter_cells()))

    def test_set_and_unset_return_previous(self) -> None:
        board = Board(2)
        cell = board.cell_at(1, 2)
        self.assertIsNone(board.set(cell, 3))
        self.assertEqual(board.set(cell, 4), 3)
        self.assertEqual(board.unset(cell), 4)
        self.assertIsNone(board.unset(cell))

    def test_set_rejects_out_of_range_value(self) -> None:
        board = Board(2)
        with self.assertRaises(ValueError):
            board.set(board.cell_at(0, 0), 5)

    def test_foreign_cell_is_index_error(self) -> None:
        board = Board(2)
        with self.assertRaises(IndexError):
            board.get(CellLoc(0, 3))

    def test_parse_ignores_layout(self) -> None:
        board = Board.parse(
            """
            . . . | 4 . . | 8 7 .
            4 . 3 | . . . | . . .
            2 . . | . . 3 | . . 9
            ---------------------
            . . 6 | 2 . . | . . 7
            . . . | 9 . 6 | . . .
            3 . 9 | . 8 . | . . .
            ---------------------
            . . . | . . . | . 4 .
            8 7 2 | 5 . . | . . .
            . . . | 7 2 . | 6 . .
            """
        )
        self.assertEqual(board, Board.parse(PUZZLE))
        self.assertEqual(board.to_line(), PUZZLE)

    def test_parse_sixteen_by_sixteen_letters(self) -> None:
        text = "G" + "." * 255
        board = Board.parse(text)
        self.assertEqual(board.base_size, 4)
        self.assertEqual(board.get_at(0, 0), 16)
        self.assertEqual(board.to_line(), text)

    def test_parse_errors(self) -> None:
        with self.assertRaises(BoardParseError):
            Board.parse("123")
        with self.assertRaises(BoardParseError):
            Board.parse("5...............")

    def test_possible_values(self) -> None:
        board = Board.parse("12.. .... .... ....")
        self.assertEqual(board.possible_values(board.cell_at(1, 1)), {3, 4})
        self.assertEqual(board.possible_values(board.cell_at(0, 3)), {3, 4})
        self.assertIsNone(board.possible_values(board.cell_at(0, 0)))

    def test_equality_and_copy(self) -> None:
        board = Board.parse(PUZZLE)
        clone = board.copy()
        self.assertEqual(board, clone)
        clone.set(clone.cell_at(0, 0), 6)
        self.assertNotEqual(board, clone)
        self.assertNotEqual(Board(2), Board(3))

    def test_subset(self) -> None:
        puzzle = Board.parse(PUZZLE)
        solution = Board.parse(SOLUTION)
        self.assertTrue(puzzle.is_subset_of(solution))
        self.assertFalse(solution.is_subset_of(puzzle))

    def test_str_and_format(self) -> None:
        board = Board.parse("12.. .... .... ...4")
        self.assertEqual(str(board), "1 2 . .\n. . . .\n. . . .\n. . . 4\n")
        self.assertEqual(
            format_board(board),
            "1 2 | . .\n. . | . .\n---------\n. . | . .\n. . | . 4",
        )


class ValidatorTests(unittest.TestCase):
    def test_solution_is_valid(self) -> None:
        validator = BoardValidator()
        self.assertTrue(validator.is_valid_solution(Board.parse(SOLUTION)))
        self.assertFalse(validator.is_valid_solution(Board.parse(PUZZLE)))

    def test_conflicts_are_reported(self) -> None:
        board = Board.parse("123123..." + "." * 72)
        conflicts = find_conflicts(board)
        self.assertTrue(conflicts)
        self.assertIn("line 0", conflicts[0])
        result = BoardValidator().validate(board)
        self.assertFalse(result.ok)

    def test_reference_mismatch(self) -> None:
        board = Board.parse("5" + PUZZLE[1:])
        result = BoardValidator().validate(board, reference=Board.parse(SOLUTION))
        self.assertFalse(result.ok)
        self.assertIn("(0,0)", result.messages[0])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
