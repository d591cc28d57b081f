# File: tests/test_frontier.py
import pytest
from site_stream.crawler.frontier import Frontier, VisitedLedger


def test_frontier_is_fifo_and_keeps_duplicates():
    frontier = Frontier(["a"])
    frontier.push("b")
    frontier.extend(["a", "c"])

    assert len(frontier) == 4
    assert [frontier.pop() for _ in range(4)] == ["a", "b", "a", "c"]
    assert not frontier


def test_pop_from_empty_frontier():
    with pytest.raises(IndexError):
        Frontier().pop()


def test_visited_ledger_only_grows():
    ledger = VisitedLedger()
    ledger.add("https://a.example/")
    ledger.add("https://a.example/")
    ledger.add("https://a.example/x")

    assert len(ledger) == 2
    assert "https://a.example/x" in ledger
    assert "https://a.example/y" not in ledger
    assert sorted(ledger) == ["https://a.example/", "https://a.example/x"]
