import unittest
from unittest import mock

from ortools.sat.python import cp_model

from sudokugen.core.constants import BoardSize
from sudokugen.engine.board import Board
from sudokugen.engine.cp_verifier import count_solutions, cp_solve, has_unique_solution
from sudokugen.engine import generator as generator_module
from sudokugen.engine.generator import (
    GeneratorConfig,
    Puzzle,
    PuzzleGenerator,
    generate_board,
    remove_redundant_givens,
)
from sudokugen.engine.solver import solved_copy
from sudokugen.engine.validator import BoardValidator


class GeneratedPuzzleTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.small = Puzzle.generate(BoardSize.FOUR_BY_FOUR, seed=11)
        cls.classic = Puzzle.generate(BoardSize.NINE_BY_NINE, seed=2024)

    def puzzles(self):
        return [("4x4", self.small), ("9x9", self.classic)]

    def test_board_is_strict_subset_of_solution(self) -> None:
        for name, puzzle in self.puzzles():
            with self.subTest(size=name):
                self.assertTrue(puzzle.board.is_subset_of(puzzle.solution))
                self.assertNotEqual(puzzle.board, puzzle.solution)
                self.assertLess(puzzle.givens_count, puzzle.board.side ** 2)

    def test_solution_is_valid(self) -> None:
        validator = BoardValidator()
        for name, puzzle in self.puzzles():
            with self.subTest(size=name):
                self.assertTrue(validator.is_valid_solution(puzzle.solution))
                self.assertTrue(validator.validate(puzzle.board).ok)

    def test_deterministic_resolve_reproduces_solution(self) -> None:
        for name, puzzle in self.puzzles():
            with self.subTest(size=name):
                self.assertEqual(solved_copy(puzzle.board), puzzle.solution)

    def test_solution_is_unique(self) -> None:
        for name, puzzle in self.puzzles():
            with self.subTest(size=name):
                self.assertTrue(puzzle.is_solution_unique())
                self.assertTrue(has_unique_solution(puzzle.board))

    def test_guess_alternatives_exclude_chosen_value(self) -> None:
        for name, puzzle in self.puzzles():
            with self.subTest(size=name):
                givens = set(puzzle.board.givens())
                for cell, options in puzzle.guesses.items():
                    self.assertNotIn(cell, givens)
                    self.assertNotIn(puzzle.solution.get(cell), options)

    def test_no_given_can_be_dropped(self) -> None:
        board = self.small.board.copy()
        self.assertEqual(remove_redundant_givens(board, max_workers=1), 0)
        self.assertEqual(board, self.small.board)

    def test_seed_is_reproducible(self) -> None:
        again = Puzzle.generate(BoardSize.FOUR_BY_FOUR, seed=11)
        self.assertEqual(again.board, self.small.board)
        self.assertEqual(again.solution, self.small.solution)

    def test_to_dict(self) -> None:
        data = self.classic.to_dict()
        self.assertEqual(data["base_size"], 3)
        self.assertEqual(data["seed"], 2024)
        self.assertEqual(data["givens"], self.classic.givens_count)
        self.assertEqual(Board.parse(data["board"]), self.classic.board)
        self.assertEqual(Board.parse(data["solution"]), self.classic.solution)


class GeneratorTests(unittest.TestCase):
    def test_generator_continues_one_random_stream(self) -> None:
        generator = PuzzleGenerator(GeneratorConfig(base_size=2, seed=5, max_workers=1))
        puzzles = [generator.generate() for _ in range(3)]
        self.assertEqual(puzzles[0].board, Puzzle.generate(2, seed=5).board)
        for puzzle in puzzles:
            self.assertEqual(puzzle.seed, 5)
            self.assertEqual(count_solutions(puzzle.board), 1)

    def test_generate_board(self) -> None:
        board = generate_board(BoardSize.FOUR_BY_FOUR)
        self.assertEqual(board.base_size, 2)
        self.assertEqual(count_solutions(board), 1)

    def test_minimization_never_adds_givens(self) -> None:
        snapshots = []

        def record_then_minimize(board, max_workers=None):
            snapshots.append(board.copy())
            return remove_redundant_givens(board, max_workers=max_workers)

        with mock.patch.object(
            generator_module, "remove_redundant_givens", side_effect=record_then_minimize
        ):
            puzzle = Puzzle.generate(BoardSize.NINE_BY_NINE, seed=77)

        self.assertEqual(len(snapshots), 1)
        guess_only = snapshots[0]
        self.assertLessEqual(puzzle.givens_count, len(guess_only.givens()))
        self.assertTrue(puzzle.board.is_subset_of(guess_only))
        self.assertTrue(guess_only.is_subset_of(puzzle.solution))

    def test_remove_redundant_givens_on_full_board(self) -> None:
        board = Board.parse("1234 3412 2143 4321")
        removed = remove_redundant_givens(board)
        self.assertGreater(removed, 0)
        self.assertEqual(count_solutions(board), 1)
        self.assertEqual(cp_solve(board), Board.parse("1234 3412 2143 4321"))


class CpVerifierTests(unittest.TestCase):
    def test_counts_stop_at_limit(self) -> None:
        self.assertEqual(count_solutions(Board(2), limit=2), 2)
        self.assertEqual(count_solutions(Board(2), limit=5), 5)

    def test_unsolvable_board_has_no_solution(self) -> None:
        board = Board.parse("123. ...4 .... ....")
        self.assertEqual(count_solutions(board), 0)
        self.assertIsNone(cp_solve(board))

    def test_undecided_search_is_not_unique(self) -> None:
        with mock.patch.object(cp_model.CpSolver, "solve", return_value=cp_model.UNKNOWN):
            self.assertEqual(count_solutions(Board(2), limit=2, timeout=0.1), 2)
            self.assertFalse(has_unique_solution(Board.parse("1234 3412 2143 4321")))

    def test_cp_solution_matches_propagation_solver(self) -> None:
        board = Board.parse(
            "...4..87.4.3......2....3..9..62....7...9.6...3.9.8...........4.8725........72.6.."
        )
        self.assertTrue(has_unique_solution(board))
        self.assertEqual(cp_solve(board), solved_copy(board))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
