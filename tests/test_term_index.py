"""
Unit tests for the TermIndex write path, read path and maintenance operations
Run with: pytest tests/test_term_index.py -v
"""

import pytest
import sys
import logging
import threading
from pathlib import Path
from unittest.mock import MagicMock

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from omegaconf import OmegaConf

from termindex import CountRead, DataStore, MemoryStore, TermIndex, init_index
from termindex.core import IndexWriter, url_set_key, term_counter_key, term_from_key, document_from_key
from termindex.store import StoreError, WrongTypeError


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def index(store):
    return init_index(store)


@pytest.fixture
def sample_pages():
    """Sample documents as text blocks."""
    return {
        'https://en.wikipedia.org/wiki/Java_(programming_language)': [
            'Java is a programming language.',
            'Java programs run on the Java virtual machine.',
        ],
        'https://en.wikipedia.org/wiki/Programming_language': [
            'A programming language is a notation for programs.',
        ],
        'https://en.wikipedia.org/wiki/Cat': [
            'The cat sat on the mat.',
        ],
    }


def assert_invariant(store):
    """Every URLSet member has a positive count and every count has its URLSet entry."""
    for key in store.keys('URLSet:*'):
        term = key[len('URLSet:'):]
        for document_id in store.smembers(key):
            assert int(store.hget(term_counter_key(document_id), term)) >= 1

    for key in store.keys('TermCounter:*'):
        document_id = document_from_key(key)
        for term, count in store._data[key].items():
            if count >= 1:
                assert document_id in store.smembers(url_set_key(term))


class TestKeys:
    """Test key naming."""

    def test_key_names(self):
        assert url_set_key('cat') == 'URLSet:cat'
        assert term_counter_key('d1') == 'TermCounter:d1'

    def test_term_from_key(self):
        assert term_from_key('URLSet:cat') == 'cat'
        assert term_from_key('URLSet:') == ''
        assert term_from_key('URLSet') == ''
        assert term_from_key('URLSet:a:b') == 'a'

    def test_document_from_key_keeps_delimiters(self):
        assert document_from_key('TermCounter:https://example.com/a') == 'https://example.com/a'


class TestInitialization:
    """Test index construction."""

    def test_identifiers(self, index):
        assert index.dstore == DataStore.MEMORY
        assert index.count_read == CountRead.PURE
        assert index.identifier_short == 'TermIndex_dMcP'
        assert 'datastore=DataStore.MEMORY' in repr(index)

    def test_count_read_from_string(self, store):
        index = TermIndex(store, count_read='increment')
        assert index.count_read == CountRead.INCREMENT
        assert index.reader.count_read == CountRead.INCREMENT

    def test_custom_store(self):
        """Test any StoreClient implementation is accepted."""
        class OtherStore(MemoryStore):
            pass

        assert TermIndex(OtherStore()).dstore == DataStore.MEMORY

    def test_from_config(self):
        config = OmegaConf.create({
            'datastore': {'name': 'memory'},
            'index': {'count_read': 'INCREMENT'},
        })
        index = TermIndex.from_config(config)
        assert isinstance(index.store, MemoryStore)
        assert index.count_read == CountRead.INCREMENT

    def test_separate_indexes_share_nothing(self):
        """Test there is no process-wide state between instances."""
        a = init_index(MemoryStore())
        b = init_index(MemoryStore())
        a.index_page('d1', ['cat'])
        assert b.get_urls('cat') == set()


class TestIndexPage:
    """Test the write path."""

    def test_round_trip(self, index):
        index.index_page('d1', ['The cat sat.'])
        assert index.get_counts('cat') == {'d1': 1}
        assert index.get_urls('the') == {'d1'}
        assert index.get_count('d1', 'sat') == 1

    def test_counts_merge_across_blocks(self, index):
        index.index_page('d1', ['The cat.', 'The other cat.'])
        assert index.get_count('d1', 'cat') == 2
        assert index.get_count('d1', 'the') == 2

    def test_reindex_doubles_counts(self, index):
        """Test counts accumulate while membership stays single."""
        blocks = ['The cat sat on the mat.']
        index.index_page('d1', blocks)
        index.index_page('d1', blocks)

        assert index.get_counts('the') == {'d1': 4}
        assert index.get_count('d1', 'mat') == 2
        assert index.get_urls('cat') == {'d1'}

    def test_is_indexed(self, index):
        assert not index.is_indexed('d1')
        index.index_page('d1', ['hello'])
        assert index.is_indexed('d1')
        assert not index.is_indexed('d2')

    def test_empty_document_writes_nothing(self, index, store):
        """Test a document with no terms issues no transaction."""
        index.index_page('d1', [])
        index.index_page('d2', ['...'])
        assert len(store) == 0
        assert not index.is_indexed('d1')

    def test_invariant_holds(self, index, store, sample_pages):
        for url, blocks in sample_pages.items():
            index.index_page(url, blocks)
        assert_invariant(store)

    def test_single_transaction_per_document(self):
        """Test all of a document's commands go through one transaction."""
        store = MagicMock()
        tx = store.transaction.return_value

        IndexWriter(store).index_page('d1', ['a b a'])

        store.transaction.assert_called_once()
        tx.execute.assert_called_once()
        assert tx.sadd.call_count == 2
        tx.hincrby.assert_any_call('TermCounter:d1', 'a', 2)
        tx.hincrby.assert_any_call('TermCounter:d1', 'b', 1)
        tx.sadd.assert_any_call('URLSet:a', 'd1')
        store.sadd.assert_not_called()
        store.hincrby.assert_not_called()

    def test_failed_transaction_leaves_prior_state(self, index, store):
        """Test a failing commit does not partially apply."""
        index.index_page('d1', ['cat dog'])
        # Make URLSet:zebra a hash so the next commit fails on it
        store.hincrby('URLSet:zebra', 'x', 1)

        with pytest.raises(WrongTypeError):
            index.index_page('d1', ['cat dog zebra'])

        assert index.get_count('d1', 'cat') == 1
        assert index.get_count('d1', 'zebra') == 0
        assert index.get_urls('dog') == {'d1'}

    def test_write_counts_rejects_non_positive_counts(self, store):
        """Test a zero or negative count is rejected before anything is written."""
        writer = IndexWriter(store)

        with pytest.raises(ValueError):
            writer.write_counts('d1', {'cat': 2, 'x': 0})
        with pytest.raises(ValueError):
            writer.write_counts('d1', {'y': -1})

        assert len(store) == 0
        assert not writer.is_indexed('d1')

    def test_write_counts(self, index, store):
        """Test precomputed counts keep URLSet and TermCounter in step."""
        index.writer.write_counts('d1', {'cat': 3})
        assert index.get_counts('cat') == {'d1': 3}
        assert_invariant(store)

    def test_store_errors_propagate(self):
        """Test connection failures are not swallowed or retried."""
        store = MagicMock()
        store.transaction.return_value.execute.side_effect = StoreError("connection lost")

        index = TermIndex(store)
        with pytest.raises(StoreError):
            index.index_page('d1', ['cat'])
        store.transaction.return_value.execute.assert_called_once()

    def test_concurrent_documents_sharing_terms(self, index, store):
        """Test concurrent indexing of distinct documents loses no updates."""
        def worker(document_id, repeat):
            for _ in range(repeat):
                index.index_page(document_id, ['shared term', 'only ' + document_id])

        threads = [
            threading.Thread(target=worker, args=(f"d{i}", 50 + i))
            for i in range(4)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert index.get_counts('shared') == {'d0': 50, 'd1': 51, 'd2': 52, 'd3': 53}
        assert index.get_urls('only') == {'d0', 'd1', 'd2', 'd3'}
        assert index.get_count('d2', 'd2') == 52
        assert_invariant(store)


class TestReads:
    """Test the read path."""

    def test_unknown_term(self, index):
        assert index.get_urls('nothing') == set()
        assert index.get_counts('nothing') == {}

    def test_get_counts_multiple_documents(self, index, sample_pages):
        for url, blocks in sample_pages.items():
            index.index_page(url, blocks)

        assert index.get_counts('programming') == {
            'https://en.wikipedia.org/wiki/Java_(programming_language)': 1,
            'https://en.wikipedia.org/wiki/Programming_language': 1,
        }
        assert index.get_counts('java') == {
            'https://en.wikipedia.org/wiki/Java_(programming_language)': 3,
        }

    def test_pure_count_read_has_no_side_effects(self, index, store):
        index.index_page('d1', ['cat'])

        assert index.get_count('d1', 'dog') == 0
        assert index.get_count('d2', 'cat') == 0
        assert store.hget('TermCounter:d1', 'dog') is None
        assert not index.is_indexed('d2')

    def test_increment_count_read_creates_fields(self, store):
        """Test the increment-by-zero read keeps its field-creating behavior."""
        index = init_index(store, count_read=CountRead.INCREMENT)
        index.index_page('d1', ['cat'])

        assert index.get_count('d1', 'cat') == 1
        assert index.get_count('d1', 'dog') == 0
        assert store.hget('TermCounter:d1', 'dog') == '0'

        assert index.get_count('d2', 'cat') == 0
        assert index.is_indexed('d2')
        # Zero-valued fields have no URLSet entry, which the invariant allows
        assert index.get_urls('dog') == set()
        assert_invariant(store)


class TestAdminOps:
    """Test enumeration and bulk deletion."""

    def test_key_enumeration(self, index, sample_pages):
        for url, blocks in sample_pages.items():
            index.index_page(url, blocks)

        assert 'URLSet:java' in index.url_set_keys()
        assert index.term_counter_keys() == {f"TermCounter:{url}" for url in sample_pages}

    def test_term_set(self, index):
        index.index_page('d1', ['The cat sat.'])
        index.index_page('d2', ['A dog'])
        assert index.term_set() == {'the', 'cat', 'sat', 'a', 'dog'}

    def test_term_set_empty_term(self, index):
        """Test the empty-string term from a leading delimiter."""
        index.index_page('d1', ['(cat)'])
        assert index.term_set() == {'', 'cat'}

    def test_term_set_truncates_delimited_terms(self, index, store, caplog):
        """Test a term containing the delimiter is truncated and flagged."""
        store.sadd('URLSet:a:b', 'd1')
        with caplog.at_level(logging.WARNING):
            terms = index.term_set()
        assert terms == {'a'}
        assert 'URLSet:a:b' in caplog.text

    def test_list_indexed_files(self, index, sample_pages):
        for url, blocks in sample_pages.items():
            index.index_page(url, blocks)
        assert index.list_indexed_files() == sorted(sample_pages)

    def test_dump_index(self, index):
        index.index_page('d1', ['cat cat dog'])
        index.index_page('d2', ['dog'])
        assert index.dump_index() == {
            'cat': {'d1': 2},
            'dog': {'d1': 1, 'd2': 1},
        }

    def test_print_index(self, index, capsys):
        index.index_page('d1', ['cat cat dog'])
        index.index_page('d2', ['dog'])
        index.print_index()
        assert capsys.readouterr().out == "cat\n    d1 2\ndog\n    d1 1\n    d2 1\n"

    def test_delete_url_sets(self, index):
        index.index_page('d1', ['cat'])
        assert index.delete_url_sets() == 1
        assert index.get_urls('cat') == set()
        assert index.is_indexed('d1')

    def test_delete_term_counters(self, index):
        index.index_page('d1', ['cat dog'])
        assert index.delete_term_counters() == 1
        assert not index.is_indexed('d1')
        assert index.get_urls('cat') == {'d1'}

    def test_delete_all_keys(self, index, store, sample_pages):
        for url, blocks in sample_pages.items():
            index.index_page(url, blocks)
        store.sadd('unrelated', 'x')

        index.delete_all_keys()

        assert len(store) == 0
        assert index.get_urls('java') == set()
        assert index.get_urls('cat') == set()
        for url in sample_pages:
            assert not index.is_indexed(url)

    def test_delete_with_nothing_to_delete(self):
        """Test no transaction is opened for an empty scan."""
        store = MagicMock()
        store.keys.return_value = set()

        assert TermIndex(store).delete_all_keys() == 0
        store.transaction.assert_not_called()

    def test_delete_uses_one_transaction(self):
        store = MagicMock()
        store.keys.return_value = {'URLSet:a', 'URLSet:b'}
        tx = store.transaction.return_value

        TermIndex(store).delete_url_sets()

        store.keys.assert_called_once_with('URLSet:*')
        store.transaction.assert_called_once()
        assert tx.delete.call_count == 2
        tx.execute.assert_called_once()
