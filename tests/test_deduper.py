from p455w0rd.Deduper import BoundedDeduper


def test_check_or_add():
    deduper = BoundedDeduper(capacity=10)
    assert deduper.check_or_add("a") is False
    assert deduper.check_or_add("a") is True
    assert deduper.check_or_add("b") is False
    assert len(deduper) == 2


def test_clears_when_full():
    deduper = BoundedDeduper(capacity=2)
    deduper.check_or_add("a")
    deduper.check_or_add("b")
    assert deduper.check_or_add("c") is False
    assert deduper.clears == 1
    assert len(deduper) == 1
    # forgotten after the clear
    assert deduper.check_or_add("a") is False
