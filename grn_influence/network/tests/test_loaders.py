"""
Tests for Network Loaders
"""

import pytest

from grn_influence.network.graph import MalformedGraphError
from grn_influence.network.loaders import (
    load_gene_list,
    load_grn_edges,
    load_ranked_genes,
    load_regulons_gmt,
    load_score_table,
)


class TestLoadGrnEdges:
    """Tests for adjacency table loading."""

    def test_load_adjacency(self, tmp_path):
        path = tmp_path / "adjacencies.tsv"
        path.write_text(
            "TF\ttarget\timportance\n"
            "SOX2\tPAX6\t12.3\n"
            "SOX2\tNES\t4.1\n"
            "PAX6\tSOX2\t1.0\n"
        )

        grn = load_grn_edges(str(path))

        assert grn.targets_of("SOX2") == {"PAX6", "NES"}
        assert grn.sources_of("SOX2") == {"PAX6"}
        assert grn.graph["SOX2"]["PAX6"]["weight"] == pytest.approx(12.3)

    def test_load_without_weight_column(self, tmp_path):
        path = tmp_path / "edges.csv"
        path.write_text("regulator,gene\nA,B\nB,C\n")

        grn = load_grn_edges(
            str(path), source_column="regulator", target_column="gene", sep=","
        )
        assert grn.n_edges == 2

    def test_gene_named_na_is_kept(self, tmp_path):
        path = tmp_path / "edges.tsv"
        path.write_text("TF\ttarget\nA\tNA\n")

        assert load_grn_edges(str(path)).targets_of("A") == {"NA"}

    def test_empty_endpoint_is_malformed(self, tmp_path):
        path = tmp_path / "edges.tsv"
        path.write_text("TF\ttarget\nA\tB\n\tC\n")

        with pytest.raises(MalformedGraphError):
            load_grn_edges(str(path))

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "edges.tsv"
        path.write_text("source\ttarget\nA\tB\n")

        with pytest.raises(ValueError, match="missing columns"):
            load_grn_edges(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_grn_edges(str(tmp_path / "nope.tsv"))


class TestLoadRegulonsGmt:
    """Tests for regulon GMT loading."""

    def test_load_gmt(self, tmp_path):
        path = tmp_path / "regulons.gmt"
        path.write_text(
            "SOX2(+)\tpySCENIC\tPAX6\tNES\n"
            "PAX6_(+)\tpySCENIC\tSOX2\n"
            "SOX2(-)\tpySCENIC\tGFAP\n"
        )

        grn = load_regulons_gmt(str(path))

        # Activating and repressing regulons of the same TF are merged
        assert grn.targets_of("SOX2") == {"PAX6", "NES", "GFAP"}
        assert grn.targets_of("PAX6") == {"SOX2"}

    def test_keep_suffix(self, tmp_path):
        path = tmp_path / "regulons.gmt"
        path.write_text("SOX2(+)\tdesc\tPAX6\n")

        grn = load_regulons_gmt(str(path), strip_regulon_suffix=False)
        assert grn.targets_of("SOX2(+)") == {"PAX6"}

    def test_malformed_lines_skipped(self, tmp_path):
        path = tmp_path / "regulons.gmt"
        path.write_text("BROKEN\tonly_description\n\nTF1\tdesc\tGeneA\tNA\t\n")

        grn = load_regulons_gmt(str(path))
        assert grn.regulators == ["TF1"]
        assert grn.targets_of("TF1") == {"GeneA"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_regulons_gmt(str(tmp_path / "missing.gmt"))


class TestScoreAndGeneLists:
    """Tests for score table and gene list loading."""

    def test_load_score_table(self, tmp_path):
        path = tmp_path / "fgsea.csv"
        path.write_text("tf,nes,pval\nTF1,2.0,0.01\nTF2,-1.5,0.2\nTF3,,0.9\n")

        scores = load_score_table(str(path))
        assert scores == {"TF1": 2.0, "TF2": -1.5}

    def test_load_score_table_custom_columns(self, tmp_path):
        path = tmp_path / "fgsea.tsv"
        path.write_text("pathway\tNES\nTF1\t1.25\n")

        scores = load_score_table(str(path), id_column="pathway", score_column="NES")
        assert scores == {"TF1": 1.25}

    def test_load_score_table_missing_column(self, tmp_path):
        path = tmp_path / "scores.csv"
        path.write_text("tf,score\nTF1,1.0\n")

        with pytest.raises(ValueError):
            load_score_table(str(path))

    def test_load_ranked_genes(self, tmp_path):
        path = tmp_path / "degs.csv"
        path.write_text("gene,logFC\nGeneA,1.5\nGeneB,-2.0\n")

        ranked = load_ranked_genes(str(path))
        assert ranked["GeneB"] == -2.0
        assert ranked.name == "logFC"

    def test_load_plain_gene_list(self, tmp_path):
        path = tmp_path / "degs.txt"
        path.write_text("# DEGs\nGeneA\n\nGeneB\nGeneA\n")

        assert load_gene_list(str(path)) == {"GeneA", "GeneB"}

    def test_load_gene_list_column(self, tmp_path):
        path = tmp_path / "degs.csv"
        path.write_text("gene,padj\nGeneA,0.01\nGeneC,0.02\n")

        assert load_gene_list(str(path), column="gene") == {"GeneA", "GeneC"}

    def test_na_gene_names_kept(self, tmp_path):
        scores_path = tmp_path / "scores.csv"
        scores_path.write_text("tf,nes\nNA,1.0\nNone,2.0\nTF3,NA\n")
        genes_path = tmp_path / "degs.csv"
        genes_path.write_text("gene,padj\nNA,0.01\n,0.02\nGeneA,0.03\n")

        assert load_score_table(str(scores_path)) == {"NA": 1.0, "None": 2.0}
        assert load_gene_list(str(genes_path), column="gene") == {"NA", "GeneA"}
