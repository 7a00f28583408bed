import time

from scrollda.da import DaItem, DaItemLockStatus, DaManager

KEY_A = b"\x01" * 32
KEY_B = b"\x02" * 32


def test_item_get_returns_data_while_alive():
    item = DaItem(raw=[1, 2], alive_secs=60)
    assert item.get() == [1, 2]
    assert item.is_dead() is False


def test_item_expired_returns_none():
    item = DaItem(raw="data", alive_secs=60)
    item.dead_time = time.monotonic() - 1
    assert item.is_dead() is True
    assert item.get() is None


def test_item_touch_extends_life():
    item = DaItem(raw="data", alive_secs=60)
    item.dead_time = time.monotonic() - 1
    item.touch()
    assert item.is_dead() is False
    assert item.get() == "data"


def test_locked_item_has_no_data():
    item = DaItem.locked(30)
    assert item.raw is None
    assert item.get() is None
    assert item.try_lock() is DaItemLockStatus.FAILED


def test_item_try_lock_with_data_reports_exist():
    item = DaItem(raw="data", alive_secs=10)
    assert item.try_lock() is DaItemLockStatus.EXIST


def test_manager_put_and_get():
    mgr = DaManager()
    mgr.put(KEY_A, "pob", 120)
    assert mgr.get(KEY_A) == "pob"
    assert mgr.get(KEY_B) is None


def test_manager_put_keeps_first_value():
    mgr = DaManager()
    mgr.put(KEY_A, "first", 120)
    mgr.put(KEY_A, "second", 120)
    assert mgr.get(KEY_A) == "first"


def test_manager_try_lock_states():
    mgr = DaManager()
    mgr.put(KEY_A, "pob", 120)
    assert mgr.try_lock([KEY_A, KEY_B], 120) == [
        DaItemLockStatus.EXIST,
        DaItemLockStatus.LOCKED,
    ]
    assert mgr.try_lock([KEY_B], 120) == [DaItemLockStatus.FAILED]
    assert mgr.get(KEY_B) is None


def test_put_fills_lock_placeholder():
    mgr = DaManager()
    mgr.try_lock([KEY_A], 120)
    mgr.put(KEY_A, "pob", 120)
    assert mgr.get(KEY_A) == "pob"
    assert mgr.try_lock([KEY_A], 120) == [DaItemLockStatus.EXIST]


def test_dead_items_are_cleaned_on_write():
    mgr = DaManager()
    mgr.put(KEY_A, "pob", 120)
    mgr._data[KEY_A].dead_time = time.monotonic() - 1
    mgr.put(KEY_B, "other", 120)
    assert len(mgr) == 1
    assert mgr.get(KEY_A) is None
    assert mgr.try_lock([KEY_A], 120) == [DaItemLockStatus.LOCKED]