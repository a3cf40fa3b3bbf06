"""Tests for schema validation rules."""

from __future__ import annotations

import unittest

from pydantic import ValidationError

from model_lab.schemas import CorrelationMatrix, ModelCandidate, ModelFamily, Step, SummaryStatistics, WorkflowState


class TestCorrelationMatrix(unittest.TestCase):
    def test_valid_matrix(self):
        matrix = CorrelationMatrix(labels=("a", "b"), values=((1.0, 0.3), (0.3, 1.0)))
        self.assertEqual(matrix.coefficient("a", "b"), 0.3)

    def test_rejects_bad_matrices(self):
        cases = {
            "not square": (("a", "b"), ((1.0, 0.3),)),
            "ragged": (("a", "b"), ((1.0,), (0.3, 1.0))),
            "diagonal": (("a", "b"), ((0.9, 0.3), (0.3, 1.0))),
            "asymmetric": (("a", "b"), ((1.0, 0.3), (0.2, 1.0))),
            "out of range": (("a", "b"), ((1.0, 1.5), (1.5, 1.0))),
        }
        for name, (labels, values) in cases.items():
            with self.subTest(case=name):
                with self.assertRaises(ValidationError):
                    CorrelationMatrix(labels=labels, values=values)

    def test_frozen(self):
        matrix = CorrelationMatrix(labels=("a",), values=((1.0,),))
        with self.assertRaises(ValidationError):
            matrix.labels = ("b",)


class TestRecords(unittest.TestCase):
    def test_summary_rejects_negative_std(self):
        with self.assertRaises(ValidationError):
            SummaryStatistics(mean=1, std_dev=-0.1, min=0, max=2)

    def test_workflow_state_rejects_out_of_range_step(self):
        with self.assertRaises(ValidationError):
            WorkflowState(active_step=7)

    def test_workflow_state_defaults(self):
        state = WorkflowState()
        self.assertIs(state.active_step, Step.INGEST)
        self.assertIs(state.selected_model, ModelFamily.SARIMAX)
        self.assertFalse(state.completed)

    def test_candidate_rejects_negative_wmape(self):
        with self.assertRaises(ValidationError):
            ModelCandidate(name="ARIMA", order_label="ARIMA", aic=1, wmape=-1, r2=0.5, rmse=1, training_time_seconds=1)

    def test_step_labels(self):
        self.assertEqual(Step.STATIONARITY.label, "Stationarity")


if __name__ == "__main__":
    unittest.main()
