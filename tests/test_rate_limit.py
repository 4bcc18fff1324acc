from __future__ import annotations

import unittest

from formintake.middleware.rate_limit import MinuteBucketRateLimiter


class FakeClock:
    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class MinuteBucketRateLimiterTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock(1_700_000_040.0)
        self.limiter = MinuteBucketRateLimiter(limit=60, clock=self.clock)

    def test_sixtieth_request_allowed_sixty_first_rejected(self) -> None:
        results = [self.limiter.hit("203.0.113.5") for _ in range(61)]
        self.assertTrue(all(results[:60]))
        self.assertFalse(results[60])
        self.assertEqual(self.limiter.count("203.0.113.5"), 61)

    def test_addresses_are_counted_separately(self) -> None:
        for _ in range(60):
            self.limiter.hit("203.0.113.5")
        self.assertTrue(self.limiter.hit("203.0.113.6"))
        self.assertFalse(self.limiter.hit("203.0.113.5"))

    def test_new_minute_resets_and_evicts_old_counters(self) -> None:
        for _ in range(61):
            self.limiter.hit("203.0.113.5")
        self.limiter.hit("203.0.113.6")
        self.assertEqual(len(self.limiter), 2)

        self.clock.now += 60
        self.assertTrue(self.limiter.hit("203.0.113.5"))
        self.assertEqual(len(self.limiter), 1)
        self.assertEqual(self.limiter.count("203.0.113.5"), 1)

    def test_same_minute_of_a_later_hour_does_not_reuse_counters(self) -> None:
        for _ in range(61):
            self.limiter.hit("203.0.113.5")
        self.clock.now += 3600
        self.assertTrue(self.limiter.hit("203.0.113.5"))

    def test_capacity_evicts_oldest_counter(self) -> None:
        limiter = MinuteBucketRateLimiter(limit=60, max_keys=2, clock=self.clock)
        limiter.hit("a")
        limiter.hit("b")
        limiter.hit("c")
        self.assertEqual(len(limiter), 2)
        self.assertEqual(limiter.count("a"), 0)
        self.assertEqual(limiter.count("c"), 1)


if __name__ == "__main__":
    unittest.main()
