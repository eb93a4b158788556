"""Command-line interface for jsonmaps."""

from __future__ import annotations

import asyncio as asyncio
import logging as logging

from jsonmaps import format_spec_issues as format_spec_issues
from jsonmaps import load_config as load_config
from jsonmaps import read_spec_document as read_spec_document
from jsonmaps import validate as validate
from jsonmaps.cli.app import main as main
from jsonmaps.cli.commands import load_table as load_table_command
from jsonmaps.cli.commands import serve as serve_command
from jsonmaps.cli.commands import stream as stream_command
from jsonmaps.cli.commands import validate as validate_command
from jsonmaps.cli.parser import build_parser as build_parser

_format_validate_summary = validate_command.format_validate_summary
_format_stream_summary = stream_command.format_stream_summary
_format_table_summary = load_table_command.format_table_summary

_run_validate = validate_command.run_validate
_run_stream = stream_command.run_stream
_run_load_table = load_table_command.run_load_table
_run_serve = serve_command.run_serve
