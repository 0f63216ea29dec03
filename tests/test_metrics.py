import json

from photo_enhancer import append_run_metrics, save_params_json
from photo_enhancer.metrics import load_json_list


class TestRunHistory:

    def test_entries_are_appended(self, tmp_path):
        models = tmp_path / "models"
        save_params_json(models, {"run": 1})
        path = save_params_json(models, {"run": 2})
        assert path == models / "enhance_params.json"
        assert json.loads(path.read_text(encoding="utf-8")) == [{"run": 1}, {"run": 2}]

    def test_metrics_file(self, tmp_path):
        path = append_run_metrics(tmp_path, {"total_seconds": 0.5})
        assert path.name == "metrics.json"
        assert load_json_list(path) == [{"total_seconds": 0.5}]

    def test_single_object_becomes_list(self, tmp_path):
        path = tmp_path / "metrics.json"
        path.write_text(json.dumps({"old": True}), encoding="utf-8")
        append_run_metrics(tmp_path, {"new": True})
        assert load_json_list(path) == [{"old": True}, {"new": True}]

    def test_corrupt_history_is_reset(self, tmp_path):
        path = tmp_path / "metrics.json"
        path.write_text("{not json", encoding="utf-8")
        append_run_metrics(tmp_path, {"new": True})
        assert load_json_list(path) == [{"new": True}]
