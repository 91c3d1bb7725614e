"""
Tests for project metadata.
"""

import iris_about


def test_metadata_summary() -> None:
    summary = iris_about.metadata_summary()
    assert summary["title"] == "Iris"
    assert summary["version"] == iris_about.__version__
    assert summary["model"].startswith("CAM16")
    assert "Y = 100" in summary["white_point_scale"]
    assert set(summary) == {
        "title", "version", "license", "description", "copyright",
        "model", "white_point_scale",
    }
