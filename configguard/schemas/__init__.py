"""Schemas bundled with configguard, loadable by file name."""
