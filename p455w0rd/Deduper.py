from typing import Set


# Exact set, cleared entirely once it holds `capacity` entries
class BoundedDeduper:
    def __init__(self, capacity: int = 1_000_000) -> None:
        self.capacity = capacity
        self.seen: Set[str] = set()
        self.clears = 0

    def check_or_add(self, value: str) -> bool:
        if value in self.seen:
            return True
        if len(self.seen) >= self.capacity:
            self.seen.clear()
            self.clears += 1
        self.seen.add(value)
        return False

    def __len__(self) -> int:
        return len(self.seen)
