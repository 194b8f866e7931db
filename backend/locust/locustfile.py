"""
Locust Load Test Suite

Seed first (see scripts/seed_load_test.py), then:
  LOCUST_TOKENS_FILE=locust/tokens.txt LOCUST_ROOM_IDS=1,2,3 \
      locust -f locust/locustfile.py --tags contention   # race for rooms
  locust -f locust/locustfile.py --tags edge              # bad input
  locust -f locust/locustfile.py                          # all tests
"""

import itertools
import os
import random
import threading

from locust import HttpUser, task, between, tag

TOKENS_FILE = os.environ.get("LOCUST_TOKENS_FILE", "locust/tokens.txt")
ROOM_IDS = [int(r) for r in os.environ.get("LOCUST_ROOM_IDS", "").split(",") if r]


def _load_tokens() -> list[str]:
    if not os.path.exists(TOKENS_FILE):
        return []
    with open(TOKENS_FILE) as f:
        return [line.strip() for line in f if line.strip()]


_tokens = itertools.cycle(_load_tokens() or [""])
_tokens_lock = threading.Lock()


def next_headers() -> dict:
    with _tokens_lock:
        token = next(_tokens)
    return {"Authorization": f"Bearer {token}"} if token else {}


class ContentionUser(HttpUser):
    """
    TEST 1: Contention - many eligible users -> few rooms

    Run: locust -f locust/locustfile.py --tags contention -u 100 -r 50 --run-time 30s

    After test, verify no room is double-booked:
      SELECT room_id, COUNT(*) FROM bookings GROUP BY room_id HAVING COUNT(*) > 1;
    Should return no rows.
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.headers = next_headers()
        self.booking_id = None

    @tag("contention")
    @task(5)
    def book_contested_room(self):
        """Everyone fights for the same handful of rooms."""
        if not ROOM_IDS or not self.headers or self.booking_id:
            return

        with self.client.post(
            "/booking",
            json={"roomId": random.choice(ROOM_IDS)},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            if resp.status_code == 200:
                self.booking_id = resp.json()["bookingId"]
                resp.success()
            elif resp.status_code == 403:
                resp.success()  # Expected: room taken
            else:
                resp.failure(f"Unexpected: {resp.status_code}")

    @tag("contention")
    @task(2)
    def switch_room(self):
        """Holders try to hop to another room."""
        if not self.booking_id:
            return

        with self.client.put(
            f"/booking/{self.booking_id}",
            json={"roomId": random.choice(ROOM_IDS)},
            headers=self.headers,
            name="/booking/{id}",
            catch_response=True,
        ) as resp:
            if resp.status_code in (200, 403):
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}")

    @tag("contention", "read")
    @task(3)
    def read_own_booking(self):
        with self.client.get("/booking", headers=self.headers, catch_response=True) as resp:
            if resp.status_code in (200, 404):
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class EdgeCaseUser(HttpUser):
    """
    TEST 2: Edge cases - Bad input handling

    Run: locust -f locust/locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.headers = next_headers()

    def _expect(self, resp, allowed):
        if resp.status_code in allowed:
            resp.success()
        else:
            resp.failure(f"Expected {allowed}, got {resp.status_code}")

    @tag("edge")
    @task
    def missing_room(self):
        with self.client.post("/booking", json={"roomId": 999999},
                              headers=self.headers, catch_response=True) as resp:
            self._expect(resp, (404,))

    @tag("edge")
    @task
    def invalid_body(self):
        with self.client.post("/booking", json={"roomId": "abc"},
                              headers=self.headers, catch_response=True) as resp:
            self._expect(resp, (400,))

    @tag("edge")
    @task
    def foreign_booking(self):
        with self.client.put("/booking/0", json={"roomId": random.choice(ROOM_IDS or [1])},
                             headers=self.headers, name="/booking/{id}",
                             catch_response=True) as resp:
            self._expect(resp, (403, 404))

    @tag("edge")
    @task
    def no_token(self):
        with self.client.get("/booking", catch_response=True) as resp:
            self._expect(resp, (401,))
