"""Tests for task definition normalization."""

import pytest

from momentum_app.data.task_normalizer import TaskNormalizer, parse_duration
from momentum_app.errors import TaskDefinitionError
from momentum_app.state.models import Task


class TestParseDuration:
    """Test duration parsing."""

    @pytest.mark.parametrize("value,expected", [
        (90, 90.0),
        (12.5, 12.5),
        ("45", 45.0),
        ("01:30", 90.0),
        ("00:45", 45.0),
        ("1:00:00", 3600.0),
        ("90:00", 5400.0),
        ("0:59", 59.0),
        (0, 0.0),
    ])
    def test_valid_durations(self, value, expected):
        """Test seconds and clock-style strings."""
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", [-1, "abc", "1:2:3:4", "1:xx", True, float("inf"), "nan",
                                       "1:99", "0:60", "1:60:00", "1:00:75"])
    def test_invalid_durations(self, value):
        """Test rejected duration values."""
        with pytest.raises(ValueError):
            parse_duration(value)


class TestTaskNormalizer:
    """Test normalizing raw task definitions."""

    def setup_method(self):
        self.normalizer = TaskNormalizer()

    def test_normalize_task(self):
        """Test a complete definition."""
        task = self.normalizer.normalize_task({"id": "a", "name": " Stretch ", "duration": "01:00"})
        assert task == Task(id="a", name="Stretch", planned_duration=60.0)

    def test_missing_id_is_generated(self):
        """Test tasks without ids get unique ones."""
        first = self.normalizer.normalize_task({"name": "A", "duration": 1})
        second = self.normalizer.normalize_task({"name": "A", "duration": 1})
        assert first.id and second.id and first.id != second.id

    def test_missing_name(self):
        """Test a blank name is rejected with its position."""
        with pytest.raises(TaskDefinitionError) as exc_info:
            self.normalizer.normalize_task({"name": "  ", "duration": 5}, index=3)
        assert exc_info.value.field == "name"
        assert exc_info.value.index == 3

    def test_default_name(self):
        """Test a configured default name fills blanks."""
        normalizer = TaskNormalizer({"default_name": "Untitled"})
        assert normalizer.normalize_task({"duration": 5}).name == "Untitled"

    def test_missing_duration(self):
        """Test a definition without a duration is rejected."""
        with pytest.raises(TaskDefinitionError) as exc_info:
            self.normalizer.normalize_task({"name": "A"})
        assert exc_info.value.field == "duration"

    def test_bad_duration(self):
        """Test an unparseable duration is rejected."""
        with pytest.raises(TaskDefinitionError) as exc_info:
            self.normalizer.normalize_task({"name": "A", "duration": "soon"})
        assert exc_info.value.value == "soon"
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_not_a_mapping(self):
        """Test non-mapping entries are rejected."""
        with pytest.raises(TaskDefinitionError):
            self.normalizer.normalize_task(["A", 5])

    def test_normalize_tasks_keeps_order(self):
        """Test normalized tasks keep their order."""
        tasks = self.normalizer.normalize_tasks([
            {"id": "1", "name": "A", "duration": 1},
            {"id": "2", "name": "B", "duration": 2},
        ])
        assert [t.id for t in tasks] == ["1", "2"]
        assert isinstance(tasks, tuple)

    def test_duplicate_ids(self):
        """Test repeated ids are rejected."""
        with pytest.raises(TaskDefinitionError) as exc_info:
            self.normalizer.normalize_tasks([
                {"id": "1", "name": "A", "duration": 1},
                {"id": "1", "name": "B", "duration": 2},
            ])
        assert exc_info.value.index == 1

    def test_not_a_list(self):
        """Test a non-list routine is rejected."""
        with pytest.raises(TaskDefinitionError):
            self.normalizer.normalize_tasks({"name": "A"})


class TestLoadRoutineFile:
    """Test loading routines from YAML."""

    def test_load_routine_file(self, tmp_path):
        """Test a routine file loads into tasks."""
        path = tmp_path / "routine.yaml"
        path.write_text(
            "tasks:\n"
            "  - {id: wake, name: Wake up, duration: 60}\n"
            "  - {id: water, name: Drink water, duration: '00:45'}\n"
        )
        tasks = TaskNormalizer().load_routine_file(path)
        assert [t.planned_duration for t in tasks] == [60.0, 45.0]

    def test_missing_tasks_key(self, tmp_path):
        """Test a file without a tasks key is rejected."""
        path = tmp_path / "routine.yaml"
        path.write_text("name: empty\n")
        with pytest.raises(TaskDefinitionError):
            TaskNormalizer().load_routine_file(path)

    def test_shipped_routine(self):
        """Test the sample morning routine loads."""
        from pathlib import Path

        path = Path(__file__).parents[2] / "config" / "routines" / "morning.yaml"
        tasks = TaskNormalizer().load_routine_file(path)
        assert len(tasks) == 5
        assert len({t.id for t in tasks}) == 5

    def test_malformed_yaml(self, tmp_path):
        """Test unparseable YAML is reported as a definition error."""
        path = tmp_path / "broken.yaml"
        path.write_text("tasks:\n  - {name: Stretch, duration: 10\n")
        with pytest.raises(TaskDefinitionError) as exc_info:
            TaskNormalizer().load_routine_file(path)
        assert exc_info.value.value == str(path)
        assert exc_info.value.__cause__ is not None
