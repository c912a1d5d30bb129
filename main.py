#!/usr/bin/env python
"""
Command line entry point for the term index.
Uses Fire for CLI and Hydra for configuration management.
"""

import os
import json
import logging
import fire
import hydra
from omegaconf import OmegaConf
from dotenv import load_dotenv

from termindex.indices.term_index import TermIndex
from termindex.data.data_loader import DataLoader

# Load .env variables and register resolver
load_dotenv()
if not OmegaConf.has_resolver("env"):
    OmegaConf.register_new_resolver("env", os.getenv)


class IndexCLI:
    """CLI for the store-backed term index."""

    def __init__(self, config_path: str = "conf", config_name: str = "config"):
        """
        Initialize CLI with configuration.

        Args:
            config_path: Path to config directory, relative to this file
            config_name: Name of main config file
        """
        self.config_path = config_path
        self.config_name = config_name
        self.config = None
        self.index_instance = None
        self.logger = logging.getLogger(__name__)

    def _init_config(self, overrides=None):
        """Initialize Hydra configuration."""
        with hydra.initialize(version_base=None, config_path=self.config_path):
            if overrides:
                self.config = hydra.compose(config_name=self.config_name, overrides=overrides)
            else:
                self.config = hydra.compose(config_name=self.config_name)

        # Setup logging
        logging.basicConfig(
            level=getattr(logging, self.config.logging.level),
            format=self.config.logging.format
        )
        self.logger = logging.getLogger(__name__)

    def _get_index_instance(self, datastore: str = None, count_read: str = None) -> TermIndex:
        """Load configuration and create the index on first use."""
        if self.index_instance is None:
            overrides = []
            if datastore:
                overrides.append(f"datastore={datastore}")
            if count_read:
                overrides.append(f"index.count_read={count_read}")

            self._init_config(overrides)
            self.index_instance = TermIndex.from_config(self.config)
            self.logger.info(f"Using {self.index_instance!r}")
        return self.index_instance

    def setup(self, datastore: str = None):
        """Verify the datastore connection."""
        try:
            index = self._get_index_instance(datastore)
            index.store.ping()
            self.logger.info(f"✓ Connected to {self.config.datastore.name}")
            self.logger.info(f"✓ Found {len(index.term_counter_keys())} indexed documents")
        except Exception as e:
            self.logger.error(f"Setup failed: {e}")
            self.logger.error("Please ensure Redis is running: sudo systemctl start redis")
            return False

        return True

    def index(self, *paths, datastore: str = None):
        """
        Index local text files.

        Args:
            paths: Files or directories to index
            datastore: Datastore to use (redis, memory)
        """
        index = self._get_index_instance(datastore)
        loader = DataLoader(self.config)

        count = 0
        for document_id, blocks in loader.load_documents(paths):
            index.index_page(document_id, blocks)
            count += 1

        self.logger.info(f"✓ Indexed {count} documents")
        return count

    def urls(self, term: str, datastore: str = None):
        """List documents containing a term."""
        return sorted(self._get_index_instance(datastore).get_urls(term))

    def count(self, document_id: str, term: str, datastore: str = None, count_read: str = None):
        """Occurrences of a term in a document."""
        return self._get_index_instance(datastore, count_read).get_count(document_id, term)

    def counts(self, term: str, datastore: str = None, count_read: str = None):
        """Document -> count for a term, as JSON."""
        counts = self._get_index_instance(datastore, count_read).get_counts(term)
        return json.dumps(counts, indent=2, sort_keys=True)

    def terms(self, datastore: str = None):
        """List indexed terms (scans the whole keyspace)."""
        return sorted(self._get_index_instance(datastore).term_set())

    def documents(self, datastore: str = None):
        """List indexed documents (scans the whole keyspace)."""
        return self._get_index_instance(datastore).list_indexed_files()

    def dump(self, datastore: str = None):
        """Print every term with its documents and counts."""
        self._get_index_instance(datastore).print_index()

    def clear(self, family: str = 'all', datastore: str = None):
        """
        Delete index keys. Not safe while other writers are active.

        Args:
            family: url, counter, or all (every key in the store)
            datastore: Datastore to use (redis, memory)
        """
        index = self._get_index_instance(datastore)

        if family == 'url':
            deleted = index.delete_url_sets()
        elif family == 'counter':
            deleted = index.delete_term_counters()
        elif family == 'all':
            deleted = index.delete_all_keys()
        else:
            raise ValueError(f"Unknown key family: {family}")

        self.logger.info(f"✓ Deleted {deleted} keys")
        return deleted


def main():
    """Main entry point."""
    fire.Fire(IndexCLI)


if __name__ == "__main__":
    main()
