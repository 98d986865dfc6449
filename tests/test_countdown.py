import asyncio
import unittest

from rivalry.client.countdown import Countdown


class CountdownTests(unittest.IsolatedAsyncioTestCase):
    async def test_ticks_until_cancelled(self) -> None:
        ticks = []
        countdown = Countdown(lambda: ticks.append(1), interval=0.01)
        countdown.start()
        await asyncio.sleep(0.1)
        self.assertTrue(countdown.running)
        self.assertTrue(countdown.cancel())
        seen = len(ticks)
        await asyncio.sleep(0.05)
        self.assertGreater(seen, 0)
        self.assertEqual(len(ticks), seen)
        self.assertFalse(countdown.running)

    async def test_cancel_is_idempotent(self) -> None:
        countdown = Countdown(lambda: None, interval=0.01)
        self.assertFalse(countdown.cancel())
        countdown.start()
        self.assertTrue(countdown.cancel())
        self.assertFalse(countdown.cancel())

    async def test_cancel_from_inside_tick(self) -> None:
        ticks = []

        def on_tick() -> None:
            ticks.append(1)
            countdown.cancel()

        countdown = Countdown(on_tick, interval=0.01)
        countdown.start()
        await asyncio.sleep(0.1)
        self.assertEqual(len(ticks), 1)

    async def test_cannot_start_twice(self) -> None:
        countdown = Countdown(lambda: None, interval=0.01)
        countdown.start()
        with self.assertRaises(RuntimeError):
            countdown.start()
        countdown.cancel()


if __name__ == "__main__":
    unittest.main()
