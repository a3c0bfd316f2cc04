import pytest

from nfeature import (NormalizedFeature, FeatureRecord, Strand, EmbeddedChild, StoredChild, MemoryFeatureStore,
                      ConfigurationError, InvalidChildError, StoreWriteError, NoIdentityError)


def test_reversed_pair_makes_reverse_child(gene):
    child, = gene.add_seq_feature((20, 10))
    assert (child.start, child.end) == (10, 20)
    assert child.strand is Strand.REVERSE


def test_pair_inherits_parent_fields(gene):
    child, = gene.add_seq_feature((1100, 1200))
    assert child.primary_tag == "exon"
    assert child.seq_id == "chrIII"
    assert child.display_name == "ZK909"
    assert child.strand is Strand.FORWARD


def test_pair_uses_parent_type_without_subtype(db):
    f = db.new_feature(primary_tag="match", seq_id="chr1", start=1, end=10)
    child, = f.add_seq_feature((2, 5))
    assert child.primary_tag == "match"


def test_normalized_children_are_stored_and_referenced(gene, db):
    added = gene.add_seq_feature((1100, 1200), (1500, 1600))
    assert all(isinstance(ref, StoredChild) for ref in gene.children)
    assert [ref.primary_id for ref in gene.children] == [f.primary_id for f in added]
    assert all(f.object_store is db for f in added)


def test_unnormalized_children_are_embedded(transient_gene):
    added = transient_gene.add_segment((1100, 1200))
    assert transient_gene.children == [EmbeddedChild(added[0])]
    assert added[0].primary_id is None


def test_unnormalized_strips_identity(gene, db):
    exon = db.new_feature(primary_tag="exon", seq_id="chrIII", start=1100, end=1200)
    assert exon.primary_id is not None
    gene.add_segment(exon)
    assert exon.primary_id is None
    assert exon.object_store is None
    assert gene.children[0].feature is exon


def test_bounds_only_grow(transient_gene):
    transient_gene.add_segment((900, 1500))
    assert (transient_gene.start, transient_gene.end) == (900, 2000)
    transient_gene.add_segment((1200, 1300))
    assert (transient_gene.start, transient_gene.end) == (900, 2000)
    transient_gene.add_segment((1900, 2500), (100, 150))
    assert (transient_gene.start, transient_gene.end) == (100, 2500)


def test_bounds_cover_all_children():
    f = NormalizedFeature(primary_tag="gene")
    pairs = [(50, 60), (10, 20), (70, 65), (30, 40)]
    for pair in pairs:
        f.add_segment(pair)
    assert f.start == 10
    assert f.end == 70


def test_seq_id_and_strand_come_from_first_child_only():
    f = NormalizedFeature(primary_tag="gene")
    f.add_segment(FeatureRecord(seq_id="chr1", start=1, end=10, strand="-", type="exon"),
                  FeatureRecord(seq_id="chr2", start=20, end=30, strand="+", type="exon"))
    assert f.seq_id == "chr1"
    assert f.strand is Strand.REVERSE
    f.add_segment(FeatureRecord(seq_id="chr3", start=40, end=50, strand="+", type="exon"))
    assert f.seq_id == "chr1"
    assert f.strand is Strand.REVERSE


def test_feature_like_is_copied_with_tags(transient_gene):
    rec = FeatureRecord(seq_id="chrIII", start=1100, end=1200, strand="+", type="exon",
                        source="refseq", name="e1", score=0.5,
                        attributes={"Target": ["EST1 1 100", "EST2 1 50"]})
    child, = transient_gene.add_segment(rec)
    assert isinstance(child, NormalizedFeature)
    assert child.source_tag == "refseq"
    assert child.display_name == "e1"
    assert child.score == 0.5
    assert child.get_tag_values("Target") == ["EST1 1 100", "EST2 1 50"]


def test_incomplete_pairs_are_skipped(transient_gene):
    added = transient_gene.add_segment((None, 10), (1100, 1200), [1300, None])
    assert len(added) == 1
    assert len(transient_gene.children) == 1


def test_nothing_to_add(gene, db):
    assert gene.add_seq_feature((None, None)) == []
    assert gene.children == []


@pytest.mark.parametrize("bad", ["exon", 42, {"start": 1}, (1, 2, 3)])
def test_invalid_child(transient_gene, bad):
    with pytest.raises(InvalidChildError):
        transient_gene.add_segment(bad)


def test_invalid_child_leaves_children_unchanged(transient_gene):
    exon = NormalizedFeature(primary_tag="exon", start=1, end=2)
    with pytest.raises(InvalidChildError):
        transient_gene.add_segment((1100, 1200), exon, object())
    assert transient_gene.children == []
    assert (transient_gene.start, transient_gene.end) == (1000, 2000)


def test_normalized_add_without_store(transient_gene):
    with pytest.raises(ConfigurationError):
        transient_gene.add_seq_feature((1100, 1200))
    assert transient_gene.children == []


def test_subfeatures_written_in_one_batch(counting_db):
    gene = counting_db.new_feature(primary_tag="gene", seq_id="chr1", start=1, end=10, subtype="exon")
    counting_db.calls.clear()
    counting_db.batches.clear()
    gene.add_seq_feature((1, 2), (3, 4), (5, 6), (7, 8), (9, 10))
    # one batch for the children, one write-back of the parent
    assert counting_db.calls["store"] == 2
    assert counting_db.batches == [5, 1]


def test_noindex_policy(counting_db):
    counting_db.index_subfeatures(False)
    gene = counting_db.new_feature(primary_tag="gene", seq_id="chr1", start=1, end=10, subtype="exon")
    counting_db.calls.clear()
    gene.add_seq_feature((1, 2), (3, 4))
    assert counting_db.calls["store_noindex"] == 1
    assert counting_db.calls["store"] == 1
    assert not any(counting_db.is_indexed(ref.primary_id) for ref in gene.children)


def test_child_already_in_store_keeps_its_id(counting_db):
    gene = counting_db.new_feature(primary_tag="gene", seq_id="chr1", start=1, end=100)
    exon = counting_db.new_feature(primary_tag="exon", seq_id="chr1", start=5, end=50)
    exon_id = exon.primary_id
    counting_db.calls.clear()
    gene.add_seq_feature(exon)
    assert gene.children == [StoredChild(exon_id)]
    # only the parent write-back
    assert counting_db.calls["store"] == 1


def test_child_from_another_store_is_restored_here():
    db1, db2 = MemoryFeatureStore(), MemoryFeatureStore()
    for _ in range(3):
        db2.new_feature(primary_tag="filler")
    exon = db1.new_feature(primary_tag="exon", seq_id="chr1", start=5, end=50)
    gene = db2.new_feature(primary_tag="gene", seq_id="chr1", start=1, end=100)

    gene.add_seq_feature(exon)

    assert exon.object_store is db2
    assert gene.children == [StoredChild(exon.primary_id)]
    assert db2.fetch(exon.primary_id).primary_tag == "exon"


def test_persisted_parent_is_written_back(gene, db):
    gene.add_seq_feature((500, 600))
    stored = db.fetch(gene.primary_id)
    assert stored.start == 500
    assert len(stored.children) == 1


def test_store_failure_is_store_write_error(flaky_db):
    gene = flaky_db.new_feature(primary_tag="gene", seq_id="chr1", start=1, end=100, subtype="exon")
    flaky_db.mode = "raise"
    with pytest.raises(StoreWriteError):
        gene.add_seq_feature((1, 10), (20, 30))
    assert gene.children == []


def test_empty_store_result_is_store_write_error(flaky_db):
    gene = flaky_db.new_feature(primary_tag="gene", seq_id="chr1", start=1, end=100, subtype="exon")
    flaky_db.mode = "empty"
    with pytest.raises(StoreWriteError):
        gene.add_seq_feature((1, 10))
    assert gene.children == []


def test_missing_id_after_store(flaky_db):
    gene = flaky_db.new_feature(primary_tag="gene", seq_id="chr1", start=1, end=100, subtype="exon")
    flaky_db.mode = "forgetful"
    with pytest.raises(NoIdentityError):
        gene.add_seq_feature((1, 10))
    assert gene.children == []


def test_failed_write_back_restores_parent(flaky_db):
    gene = flaky_db.new_feature(primary_tag="gene", start=100, end=200, subtype="exon")
    exon = flaky_db.new_feature(primary_tag="exon", seq_id="chr1", start=50, end=150, strand="-")
    flaky_db.mode = "rewrite"

    with pytest.raises(StoreWriteError):
        gene.add_seq_feature(exon, (300, 400))

    assert gene.children == []
    assert (gene.start, gene.end) == (100, 200)
    assert gene.seq_id is None
    assert gene.strand is Strand.UNKNOWN
    flaky_db.mode = "ok"
    assert flaky_db.fetch(gene.primary_id).children == []


def test_failed_write_back_keeps_embedded_child_identity(flaky_db):
    gene = flaky_db.new_feature(primary_tag="gene", seq_id="chr1", start=100, end=200)
    exon = flaky_db.new_feature(primary_tag="exon", seq_id="chr1", start=120, end=180)
    exon_id = exon.primary_id
    flaky_db.mode = "rewrite"

    with pytest.raises(StoreWriteError):
        gene.add_segment(exon)

    assert gene.children == []
    assert exon.primary_id == exon_id
    assert exon.object_store is flaky_db


@pytest.mark.parametrize("pair", [("a", "b"), (10.7, 20), (10, 20.5), (object(), 20)])
def test_non_integer_coordinates(transient_gene, pair):
    with pytest.raises(InvalidChildError) as info:
        transient_gene.add_segment(pair)
    assert isinstance(info.value, TypeError)
    assert transient_gene.children == []


@pytest.mark.parametrize("pair", [("1100", "1200"), (1100.0, 1200)])
def test_integral_coordinates_are_accepted(transient_gene, pair):
    exon, = transient_gene.add_segment(pair)
    assert (exon.start, exon.end) == (1100, 1200)
