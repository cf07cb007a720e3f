"""Lectures feature package: lecture upload and chat turns.

Mints conversation ids, validates chat input and drives the conversation
store and the answer generator for one chat turn.
"""
