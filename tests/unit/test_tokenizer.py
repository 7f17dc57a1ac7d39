"""Unit tests for label tokenization and similarity."""

import pytest

from timelens.analysis.tokenizer import (
    CONTAINMENT_SCORE,
    jaccard_similarity,
    significant_overlap,
    similarity,
    text_similarity_with_containment,
    tokenize,
    tokenize_ordered,
)


class TestTokenize:
    """Tests for tokenize and tokenize_ordered."""

    def test_empty_input(self) -> None:
        """Test blank and None labels give no tokens."""
        assert tokenize("") == frozenset()
        assert tokenize(None) == frozenset()
        assert tokenize("   ") == frozenset()

    def test_english_words_lowercased(self) -> None:
        """Test English words are split and lower-cased."""
        assert tokenize("Read Papers") == {"read", "papers"}

    def test_stop_words_removed(self) -> None:
        """Test function words are dropped."""
        assert tokenize("go to the gym") == {"go", "gym"}

    def test_single_characters_dropped(self) -> None:
        """Test one-character words are dropped."""
        assert tokenize("a b c run") == {"run"}

    def test_punctuation_split(self) -> None:
        """Test ASCII and full-width punctuation separate words."""
        assert tokenize("论文，实验。code-review") == {"论文", "实验", "code", "review"}

    def test_ideographic_bigrams(self) -> None:
        """Test long ideographic words add their bigrams."""
        assert tokenize("写论文") == {"写论文", "写论", "论文"}

    def test_two_character_word_has_no_bigrams(self) -> None:
        """Test a two-character word is kept whole only."""
        assert tokenize("健身") == {"健身"}

    def test_bigrams_limited_to_basic_ideograph_block(self) -> None:
        """Test characters past U+9FA5 are kept whole without bigrams."""
        assert tokenize("龦龧龨") == {"龦龧龨"}
        assert tokenize("龣龤龥") == {"龣龤龥", "龣龤", "龤龥"}

    def test_ordered_deduplicates_in_first_seen_order(self) -> None:
        """Test ordered tokens keep first occurrence."""
        assert tokenize_ordered("run fast run") == ["run", "fast"]


class TestJaccardSimilarity:
    """Tests for jaccard_similarity."""

    def test_identical_sets(self) -> None:
        """Test identical non-empty sets score 1."""
        assert jaccard_similarity({"a", "b"}, {"a", "b"}) == 1.0

    def test_empty_side_scores_zero(self) -> None:
        """Test an empty side scores 0."""
        assert jaccard_similarity(set(), {"a"}) == 0.0
        assert jaccard_similarity(set(), set()) == 0.0

    def test_partial_overlap(self) -> None:
        """Test intersection over union."""
        assert jaccard_similarity({"a", "b", "c"}, {"b", "c", "d"}) == pytest.approx(0.5)

    @pytest.mark.parametrize(
        ("left", "right"),
        [
            ("写论文", "写论文第三章"),
            ("read papers", "papers review"),
            ("健身", "跑步"),
        ],
    )
    def test_symmetric_and_bounded(self, left: str, right: str) -> None:
        """Test similarity is symmetric and within [0, 1]."""
        forward = similarity(left, right)
        assert forward == similarity(right, left)
        assert 0.0 <= forward <= 1.0

    def test_reflexive(self) -> None:
        """Test a label with tokens is fully similar to itself."""
        assert similarity("写论文", "写论文") == 1.0


class TestContainment:
    """Tests for text_similarity_with_containment."""

    def test_substring_boosted(self) -> None:
        """Test containment lifts the score to the floor."""
        plain = similarity("写论文", "写论文第三章")
        assert plain < CONTAINMENT_SCORE
        boosted = text_similarity_with_containment("写论文", "写论文第三章")
        assert boosted == CONTAINMENT_SCORE

    def test_case_insensitive(self) -> None:
        """Test containment ignores case."""
        assert text_similarity_with_containment("Gym", "gym session") >= CONTAINMENT_SCORE

    def test_higher_similarity_kept(self) -> None:
        """Test the boost never lowers a score."""
        assert text_similarity_with_containment("read papers", "read papers") == 1.0

    def test_empty_name_not_contained(self) -> None:
        """Test an empty name does not count as contained."""
        assert text_similarity_with_containment("", "anything") == 0.0


class TestSignificantOverlap:
    """Tests for significant_overlap."""

    def test_shared_token(self) -> None:
        """Test a shared multi-character token counts."""
        assert significant_overlap({"论文", "写论"}, {"论文"})

    def test_no_shared_token(self) -> None:
        """Test disjoint sets do not overlap."""
        assert not significant_overlap({"run"}, {"swim"})
