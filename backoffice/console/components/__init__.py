"""Reusable Streamlit widgets shared by the console pages."""

from .feedback import describe_error, render_query_error, report_mutation_error, status_badge
from .login_form import render_login_form
from .resource_list import ListPage, confirm_prompt, load_records, render_resource_list, run_mutation

__all__ = [
    'describe_error',
    'render_query_error',
    'report_mutation_error',
    'status_badge',
    'render_login_form',
    'ListPage',
    'confirm_prompt',
    'load_records',
    'render_resource_list',
    'run_mutation',
]
