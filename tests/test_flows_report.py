"""
Tests for the report flow.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import numpy as np
import pytest

from bioblitz_tree.datasources.inaturalist import Observation
from bioblitz_tree.datasources.opentree import ResolvedTaxon
from bioblitz_tree.datasources.phylopic import Attribution
from bioblitz_tree.config import Settings
from bioblitz_tree.errors import CladeNotInTreeError, EmptyTaxonSetError
from bioblitz_tree.flows import report
from bioblitz_tree.phylotree import parse_newick
from bioblitz_tree.schemas import (
    FigureStyle,
    HighlightClade,
    LabelledClade,
    MissingCladePolicy,
    ReportConfig,
)

if TYPE_CHECKING:
    from pathlib import Path

SAMPLE_NEWICK = (
    "(((Apis_mellifera,Bombus_terrestris)Insecta)Arthropoda,Turdus_merula)Bilateria;"
)

OBSERVATIONS = [
    Observation(id=1, scientific_name="Apis mellifera"),
    Observation(id=2, scientific_name="Turdus merula"),
    Observation(id=3, scientific_name="Bombus terrestris"),
    Observation(id=4, scientific_name=None),
    Observation(id=5, scientific_name="Apis mellifera"),
]

RESOLVED = [
    ResolvedTaxon(name="Apis mellifera", ott_id=365155, score=1.0, in_tree=True),
    ResolvedTaxon(name="Bombus terrestris", ott_id=103596, score=1.0, in_tree=True),
    ResolvedTaxon(name="Turdus merula", ott_id=568572, score=1.0, in_tree=True),
]

BEE = Attribution(
    uuid="bee-uuid",
    contributor="Jane Doe",
    license_url="https://creativecommons.org/licenses/by/3.0/",
)

CONFIG = ReportConfig(
    highlights=[
        HighlightClade(clade="Arthropoda", display_name="Arthropods"),
        HighlightClade(clade="Mollusca", display_name="Molluscs"),
    ],
    labelled=[
        LabelledClade(clade="Insecta", display_name="Insects", illustration_name="Apis mellifera"),
        LabelledClade(clade="Gastropoda", display_name="Snails", illustration_name="Cepaea nemoralis"),
    ],
    style=FigureStyle(title="Test report", size=4.0, dpi=72, caption_credit="Credit."),
)


class TestFetchIllustrations:
    """Test silhouette resolution for clades present in the tree."""

    @patch("bioblitz_tree.flows.report.phylopic.fetch_silhouette")
    @patch("bioblitz_tree.flows.report.phylopic.get_attribution")
    @patch("bioblitz_tree.flows.report.phylopic.get_image_uuid")
    def test_only_present_clades(
        self, mock_uuid: Mock, mock_attribution: Mock, mock_silhouette: Mock
    ) -> None:
        mock_uuid.return_value = "bee-uuid"
        mock_attribution.return_value = BEE
        mock_silhouette.return_value = np.ones((4, 4, 4))

        uuids, attributions, silhouettes = report.fetch_illustrations(
            parse_newick(SAMPLE_NEWICK), CONFIG.labelled
        )

        assert uuids == {"Insecta": "bee-uuid"}
        assert attributions == {"bee-uuid": BEE}
        assert list(silhouettes) == ["bee-uuid"]
        mock_uuid.assert_called_once_with("Apis mellifera")

    @patch("bioblitz_tree.flows.report.phylopic.fetch_silhouette")
    @patch("bioblitz_tree.flows.report.phylopic.get_attribution")
    @patch("bioblitz_tree.flows.report.phylopic.get_image_uuid")
    def test_configured_uuid_skips_lookup(
        self, mock_uuid: Mock, mock_attribution: Mock, mock_silhouette: Mock
    ) -> None:
        mock_attribution.return_value = BEE
        mock_silhouette.return_value = np.ones((4, 4, 4))
        clades = [LabelledClade(clade="Insecta", illustration_uuid="bee-uuid")]

        uuids, _, _ = report.fetch_illustrations(parse_newick(SAMPLE_NEWICK), clades)

        assert uuids == {"Insecta": "bee-uuid"}
        mock_uuid.assert_not_called()


class TestWriteReportPage:
    """Test writing the page."""

    def test_write(self, tmp_path: Path) -> None:
        path = tmp_path / "site" / "index.html"
        result = report.write_report_page("<html></html>", path)
        assert result == path
        assert path.read_text() == "<html></html>"


class TestBuildReportFlow:
    """Test the end-to-end flow with every service mocked."""

    @patch("bioblitz_tree.flows.report.phylopic.fetch_silhouette")
    @patch("bioblitz_tree.flows.report.phylopic.get_attribution")
    @patch("bioblitz_tree.flows.report.phylopic.get_image_uuid")
    @patch("bioblitz_tree.flows.report.opentree.induce_subtree")
    @patch("bioblitz_tree.flows.report.opentree.resolve_names")
    @patch("bioblitz_tree.flows.report.inaturalist.fetch_project_observations")
    def test_build_report(
        self,
        mock_observations: Mock,
        mock_resolve: Mock,
        mock_induce: Mock,
        mock_uuid: Mock,
        mock_attribution: Mock,
        mock_silhouette: Mock,
        tmp_path: Path,
    ) -> None:
        mock_observations.return_value = OBSERVATIONS
        mock_resolve.return_value = RESOLVED
        mock_induce.return_value = SAMPLE_NEWICK
        mock_uuid.return_value = "bee-uuid"
        mock_attribution.return_value = BEE
        mock_silhouette.return_value = np.ones((4, 4, 4))

        result = report.build_report(project_id="my-bioblitz", output_dir=tmp_path, config=CONFIG)

        assert result["observations"] == 5
        assert result["names"] == 3
        assert result["taxa"] == 3
        assert result["tips"] == 3
        assert result["skipped_clades"] == ["Mollusca", "Gastropoda"]

        mock_observations.assert_called_once_with("my-bioblitz")
        assert mock_resolve.call_args.args[0] == [
            "Apis mellifera",
            "Bombus terrestris",
            "Turdus merula",
        ]
        assert mock_induce.call_args.args[0] == [103596, 365155, 568572]

        assert (tmp_path / "tree.tre").read_text() == SAMPLE_NEWICK + "\n"
        for name in ("tree.svg", "tree.pdf", "index.html"):
            assert (tmp_path / name).exists()
        assert "Apis mellifera" in (tmp_path / "tree.svg").read_text()

        page = (tmp_path / "index.html").read_text()
        assert "Credit. Insects: Jane Doe, CC BY." in page
        assert "Not in this tree: Mollusca, Gastropoda" in page

    @patch("bioblitz_tree.flows.report.get_settings")
    @patch("bioblitz_tree.flows.report.phylopic.fetch_silhouette")
    @patch("bioblitz_tree.flows.report.phylopic.get_attribution")
    @patch("bioblitz_tree.flows.report.phylopic.get_image_uuid")
    @patch("bioblitz_tree.flows.report.opentree.induce_subtree")
    @patch("bioblitz_tree.flows.report.opentree.resolve_names")
    @patch("bioblitz_tree.flows.report.inaturalist.fetch_project_observations")
    def test_artifact_names_from_settings(
        self,
        mock_observations: Mock,
        mock_resolve: Mock,
        mock_induce: Mock,
        mock_uuid: Mock,
        mock_attribution: Mock,
        mock_silhouette: Mock,
        mock_settings: Mock,
        tmp_path: Path,
    ) -> None:
        mock_observations.return_value = OBSERVATIONS
        mock_resolve.return_value = RESOLVED
        mock_induce.return_value = SAMPLE_NEWICK
        mock_uuid.return_value = "bee-uuid"
        mock_attribution.return_value = BEE
        mock_silhouette.return_value = np.ones((4, 4, 4))
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            output_dir=tmp_path / "unused",
            tree_filename="lineages.tre",
            svg_filename="figure.svg",
            pdf_filename="figure.pdf",
        )
        mock_settings.return_value = settings

        result = report.build_report(project_id="my-bioblitz", output_dir=tmp_path, config=CONFIG)

        assert result["outputs"] == [
            str(tmp_path / name)
            for name in ("lineages.tre", "figure.svg", "figure.pdf", "index.html")
        ]
        for name in ("lineages.tre", "figure.svg", "figure.pdf"):
            assert (tmp_path / name).exists()
        assert 'href="figure.pdf"' in (tmp_path / "index.html").read_text()
        assert settings.output_dir == tmp_path / "unused"
        assert not (tmp_path / "unused").exists()

    @patch("bioblitz_tree.flows.report.phylopic.fetch_silhouette")
    @patch("bioblitz_tree.flows.report.phylopic.get_attribution")
    @patch("bioblitz_tree.flows.report.phylopic.get_image_uuid")
    @patch("bioblitz_tree.flows.report.opentree.induce_subtree")
    @patch("bioblitz_tree.flows.report.opentree.resolve_names")
    @patch("bioblitz_tree.flows.report.inaturalist.fetch_project_observations")
    def test_missing_clade_error_policy(
        self,
        mock_observations: Mock,
        mock_resolve: Mock,
        mock_induce: Mock,
        mock_uuid: Mock,
        mock_attribution: Mock,
        mock_silhouette: Mock,
        tmp_path: Path,
    ) -> None:
        mock_observations.return_value = OBSERVATIONS
        mock_resolve.return_value = RESOLVED
        mock_induce.return_value = SAMPLE_NEWICK
        mock_uuid.return_value = "bee-uuid"
        mock_attribution.return_value = BEE
        mock_silhouette.return_value = np.ones((4, 4, 4))
        config = CONFIG.model_copy(update={"on_missing_clade": MissingCladePolicy.ERROR})

        with pytest.raises(CladeNotInTreeError, match="Mollusca"):
            report.build_report(project_id="my-bioblitz", output_dir=tmp_path, config=config)

        assert not (tmp_path / "tree.svg").exists()


class TestEndToEnd:
    """Three observations through the real datasource code, HTTP mocked."""

    NAMES = ["Cepaea nemoralis", "Cepaea nemoralis", "Drosophila melanogaster"]
    NEWICK = "(Cepaea_nemoralis,Drosophila_melanogaster)Protostomia;"

    def fake_get(self, url: str, params: dict | None = None, **_kwargs: object) -> Mock:
        resp = Mock()
        resp.raise_for_status = Mock()
        results = [
            {"id": i, "taxon": {"id": 100 + i, "name": name, "rank": "species"}}
            for i, name in enumerate(self.NAMES, start=1)
        ]
        resp.json.return_value = {"total_results": 3, "results": results}
        return resp

    def fake_post(self, url: str, json: dict | None = None, **_kwargs: object) -> Mock:
        resp = Mock()
        resp.status_code = 200
        resp.raise_for_status = Mock()
        if url.endswith("match_names"):
            ott = {"Cepaea nemoralis": 4000, "Drosophila melanogaster": 505714}
            resp.json.return_value = {
                "results": [
                    {"name": n, "matches": [{"score": 1.0, "taxon": {"ott_id": ott[n]}}]}
                    for n in (json or {})["names"]
                ]
            }
        elif url.endswith("node_info"):
            resp.json.return_value = {"node_id": f"ott{(json or {})['ott_id']}"}
        else:
            resp.json.return_value = {"newick": self.NEWICK}
        return resp

    def test_two_tip_report(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        from bioblitz_tree.datasources.inaturalist import client as inat_client
        from bioblitz_tree.services.http import session

        monkeypatch.setattr(inat_client, "MIN_REQUEST_INTERVAL", 0.0)
        monkeypatch.setattr(session, "get", self.fake_get)
        monkeypatch.setattr(session, "post", self.fake_post)
        config = ReportConfig(style=FigureStyle(title="Two tips", size=4.0, dpi=72))

        outputs = []
        for run in ("first", "second"):
            out = tmp_path / run
            result = report.build_report(project_id="tiny", output_dir=out, config=config)
            outputs.append(((out / "tree.tre").read_bytes(), (out / "tree.svg").read_text()))

            assert result["observations"] == 3
            assert result["names"] == 2
            assert result["taxa"] == 2
            assert result["tips"] == 2

        svg = outputs[0][1]
        assert svg.count("Cepaea nemoralis") == 1
        assert svg.count("Drosophila melanogaster") == 1
        assert outputs[0] == outputs[1]


class TestEmptyProject:
    """A project with no usable observations stops before any Open Tree request."""

    def fake_get(self, url: str, params: dict | None = None, **_kwargs: object) -> Mock:
        resp = Mock()
        resp.raise_for_status = Mock()
        resp.json.return_value = {"total_results": 0, "results": []}
        return resp

    def test_no_taxa_raises(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        from bioblitz_tree.datasources.inaturalist import client as inat_client
        from bioblitz_tree.services.http import session

        mock_post = Mock()
        monkeypatch.setattr(inat_client, "MIN_REQUEST_INTERVAL", 0.0)
        monkeypatch.setattr(session, "get", self.fake_get)
        monkeypatch.setattr(session, "post", mock_post)

        with pytest.raises(EmptyTaxonSetError):
            report.build_report(project_id="empty", output_dir=tmp_path, config=CONFIG)

        mock_post.assert_not_called()
        assert not (tmp_path / "tree.tre").exists()
