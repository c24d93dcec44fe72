#!/usr/bin/env python3
"""
Tests for command line parsing.
"""
import pytest

from property_search import cli


def test_parse_args_defaults():
    args = cli.parse_args([])
    assert args.sort == "featured"
    assert args.page == 1
    assert args.page_size == 6
    assert args.similar == ""
    assert cli.filter_params_from_args(args) == {}


def test_filter_flags_become_link_params():
    args = cli.parse_args([
        "--search", "marina", "--bedrooms", "2,3", "--type", "Apartment",
        "--min-price", "500000", "--max-price", "1500000",
    ])
    assert cli.filter_params_from_args(args) == {
        "search": "marina",
        "property_type": "Apartment",
        "bedrooms": "2,3",
        "min_price": "500000",
        "max_price": "1500000",
    }


def test_unknown_sort_is_rejected():
    with pytest.raises(SystemExit):
        cli.parse_args(["--sort", "random"])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
