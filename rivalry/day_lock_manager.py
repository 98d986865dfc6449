from asyncio import Lock


class DayLockManager:
    """Hands out one asyncio.Lock per date key so writes for a day run one at a time."""

    def __init__(self):
        self.locks: dict[str, Lock] = {}  # one Lock per date_key
        self.lock = Lock()  # guards self.locks

    async def get_lock(self, date_key: str) -> Lock:
        """Get the Lock of the specified date_key

        Args:
            date_key (str): Calendar day in YYYY-MM-DD form

        Returns:
            Lock: Lock serialising writes for that day
        """
        async with self.lock:
            if date_key not in self.locks:
                self.locks[date_key] = Lock()
            return self.locks[date_key]

    async def cleanup_before(self, date_key: str):
        """Drop locks of days strictly before date_key that nobody holds

        Args:
            date_key (str): Oldest day to keep
        """
        async with self.lock:
            for key in [k for k in self.locks if k < date_key]:
                if not self.locks[key].locked():
                    del self.locks[key]
