"""Tests for scripts/check_dataset.py."""

from pathlib import Path

from scripts.check_dataset import check_dataset

SAMPLE_DATASET = Path(__file__).parent.parent / "data" / "sites.geojson"


class TestCheckDataset:
    def test_sample_dataset_passes(self, capsys):
        assert check_dataset(SAMPLE_DATASET) is True

        out = capsys.readouterr().out
        assert "Sites: 3" in out
        assert "Typology:" in out
        assert "All checks passed!" in out

    def test_broken_dataset_fails(self, tmp_path, capsys):
        path = tmp_path / "sites.geojson"
        path.write_text('{"type": "FeatureCollection", "features": [{"properties": {}}]}')

        assert check_dataset(path) is False
        assert "✗" in capsys.readouterr().out

    def test_warns_on_untagged_building(self, tmp_path, capsys):
        path = tmp_path / "sites.geojson"
        path.write_text(
            '{"type": "FeatureCollection", "features": [{"type": "Feature", '
            '"geometry": {"type": "Point", "coordinates": [0, 0]}, '
            '"properties": {"site": "Empty", "buildings": [{"doc_id": "X1", "order": ["undetermined"]}]}}]}'
        )

        assert check_dataset(path) is True
        assert "Building without tags (hidden by any filter): X1" in capsys.readouterr().out
