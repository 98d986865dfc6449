import unittest

from fastapi.testclient import TestClient

from rivalry.errors import StoreError
from rivalry.main import create_app
from rivalry.services.submission_store import InMemorySubmissionStore
from tests.helpers import AFTER_DEADLINE, FixedClock, make_pool, make_settings


class FailingStore(InMemorySubmissionStore):
    def __init__(self, error: Exception):
        super().__init__()
        self.error = error

    async def append_if_absent(self, date_key, record, uniqueness_key):
        raise self.error


class CountingStore(InMemorySubmissionStore):
    def __init__(self):
        super().__init__()
        self.appends = 0

    async def append_if_absent(self, date_key, record, uniqueness_key):
        self.appends += 1
        return await super().append_if_absent(date_key, record, uniqueness_key)


def build_client(clock=None, store=None) -> TestClient:
    app = create_app(
        settings=make_settings(),
        pool=make_pool(25),
        store=store or InMemorySubmissionStore(),
        clock=clock or FixedClock(),
    )
    return TestClient(app)


class QuizTodayTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = build_client()

    def test_quiz_shape_without_answer_key(self) -> None:
        response = self.client.get("/quiz-today")
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["dateKey"], "2024-05-01")
        self.assertEqual(data["totalQuestions"], 20)
        self.assertEqual(data["totalTimeSeconds"], 300)
        self.assertFalse(data["isLocked"])
        self.assertEqual([lifeline["id"] for lifeline in data["lifelines"]], ["fifty-fifty", "hint", "time-boost"])
        self.assertEqual(data["sabotage"]["penalty"], 120)
        self.assertEqual(data["sabotage"]["usageLimit"], 1)
        self.assertEqual(len(data["questions"]), 20)
        for question in data["questions"]:
            self.assertNotIn("answer", question)
            self.assertEqual(set(question), {"id", "category", "prompt", "options", "hint"})

    def test_same_questions_on_every_call(self) -> None:
        first = [q["id"] for q in self.client.get("/quiz-today").json()["questions"]]
        second = [q["id"] for q in self.client.get("/quiz-today").json()["questions"]]
        self.assertEqual(first, second)

    def test_locked_after_deadline(self) -> None:
        client = build_client(clock=FixedClock(AFTER_DEADLINE))
        data = client.get("/quiz-today").json()
        self.assertTrue(data["isLocked"])
        self.assertTrue(data["deadline"].startswith("2024-05-01T20:00:00"))


class SubmitTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = build_client()
        self.questions = self.client.get("/quiz-today").json()["questions"]

    def all_correct(self) -> list[dict]:
        # test pool answers are always the "A" option
        return [{"questionId": q["id"], "selectedOption": q["options"][0]} for q in self.questions]

    def submit(self, **overrides):
        body = {
            "playerName": "Ada",
            "responses": self.all_correct(),
            "timeTakenSeconds": 100,
            "lifelinesUsed": ["hint"],
        }
        body.update(overrides)
        return self.client.post("/submit", json=body)

    def test_server_grades_and_scores(self) -> None:
        response = self.submit(finalScore=999999, correctCount=20)
        self.assertEqual(response.status_code, 200)
        data = response.json()
        # 2000 base + (300 - 100) * 2 bonus - 30 for one lifeline
        self.assertEqual(data["finalScore"], 2370)
        self.assertEqual(data["correctCount"], 20)
        self.assertEqual(data["message"], "Submission received! See you on the leaderboard.")
        self.assertEqual(data["leaderboard"][0]["playerName"], "Ada")

    def test_wrong_and_unknown_answers_not_counted(self) -> None:
        responses = self.all_correct()[:10] + [
            {"questionId": q["id"], "selectedOption": q["options"][1]} for q in self.questions[10:]
        ]
        responses.append({"questionId": "not-today", "selectedOption": "A0"})
        data = self.submit(responses=responses, lifelinesUsed=[]).json()
        self.assertEqual(data["correctCount"], 10)
        self.assertEqual(data["finalScore"], 1400)

    def test_elapsed_time_is_clamped(self) -> None:
        data = self.submit(timeTakenSeconds=-500, lifelinesUsed=[]).json()
        self.assertEqual(data["finalScore"], 2600)
        entry = data["leaderboard"][0]
        self.assertEqual(entry["timeTakenSeconds"], 0)

    def test_oversized_elapsed_time_counts_as_full_budget(self) -> None:
        response = self.submit(timeTakenSeconds=int("9" * 400), lifelinesUsed=[])
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["finalScore"], 2000)
        self.assertEqual(data["leaderboard"][0]["timeTakenSeconds"], 300)

    def test_duplicate_name_any_casing_conflicts(self) -> None:
        self.assertEqual(self.submit().status_code, 200)
        response = self.submit(playerName="  aDA ")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["message"], "You have already submitted today. Come back tomorrow!")
        leaderboard = self.client.get("/leaderboard-today").json()["leaderboard"]
        self.assertEqual(len(leaderboard), 1)

    def test_known_player_rejected_before_writing(self) -> None:
        store = CountingStore()
        client = build_client(store=store)
        body = {"playerName": "Ada", "responses": []}
        self.assertEqual(client.post("/submit", json=body).status_code, 200)
        response = client.post("/submit", json={**body, "playerName": "ADA"})
        self.assertEqual(response.status_code, 409)
        self.assertEqual(store.appends, 1)

    def test_blank_name_rejected(self) -> None:
        response = self.submit(playerName="   ")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Player name is required.")

    def test_responses_must_be_list(self) -> None:
        response = self.submit(responses={"q01": "A1"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Responses must be provided as an array.")

    def test_non_object_body_rejected(self) -> None:
        response = self.client.post("/submit", json=["Ada"])
        self.assertEqual(response.status_code, 400)
        self.assertIn("message", response.json())

    def test_name_is_trimmed_and_capped(self) -> None:
        data = self.submit(playerName="  " + "z" * 50).json()
        self.assertEqual(data["leaderboard"][0]["playerName"], "z" * 32)

    def test_deadline_passed(self) -> None:
        client = build_client(clock=FixedClock(AFTER_DEADLINE))
        response = client.post("/submit", json={"playerName": "Ada", "responses": []})
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["message"], "Daily deadline has passed. Come back tomorrow!")

    def test_store_failure_is_generic_500(self) -> None:
        client = build_client(store=FailingStore(StoreError()))
        response = client.post("/submit", json={"playerName": "Ada", "responses": []})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"message": "Submission store is unavailable."})

    def test_unexpected_failure_is_500(self) -> None:
        client = build_client(store=FailingStore(RuntimeError("disk on fire")))
        response = client.post("/submit", json={"playerName": "Ada", "responses": []})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"message": "Failed to submit results."})


class LeaderboardTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = build_client()

    def post(self, name: str, time_taken: int, target: str | None = None) -> None:
        body = {"playerName": name, "responses": [], "timeTakenSeconds": time_taken, "lifelinesUsed": []}
        if target:
            body["sabotageTarget"] = target
        self.assertEqual(self.client.post("/submit", json=body).status_code, 200)

    def test_empty_leaderboard(self) -> None:
        data = self.client.get("/leaderboard-today").json()
        self.assertEqual(data["leaderboard"], [])
        self.assertEqual(data["dateKey"], "2024-05-01")
        self.assertFalse(data["isLocked"])

    def test_sabotage_applied_and_ranked(self) -> None:
        self.post("Ada", 0)  # 600
        self.post("Bob", 50, target="ada")  # 500
        self.post("Cy", 100, target="Ada")  # 400
        self.post("Dee", 110, target="Dee")  # 380, self-target ignored
        board = self.client.get("/leaderboard-today").json()["leaderboard"]
        self.assertEqual([entry["playerName"] for entry in board], ["Bob", "Cy", "Dee", "Ada"])
        ada = board[-1]
        self.assertEqual(ada["score"], 600)
        self.assertEqual(ada["sabotagePenalty"], 240)
        self.assertEqual(ada["adjustedScore"], 360)
        self.assertEqual(board[0]["sabotageTarget"], "ada")


class FiftyFiftyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = build_client()
        self.question = self.client.get("/quiz-today").json()["questions"][0]

    def test_removes_two_incorrect_options(self) -> None:
        response = self.client.post("/lifelines/fifty-fifty", json={"questionId": self.question["id"]})
        self.assertEqual(response.status_code, 200)
        removed = response.json()["removedOptions"]
        self.assertEqual(len(removed), 2)
        self.assertNotIn(self.question["options"][0], removed)
        self.assertTrue(set(removed) <= set(self.question["options"]))

    def test_same_removal_for_everyone(self) -> None:
        body = {"questionId": self.question["id"]}
        first = self.client.post("/lifelines/fifty-fifty", json=body).json()
        second = self.client.post("/lifelines/fifty-fifty", json=body).json()
        self.assertEqual(first, second)

    def test_question_not_in_todays_set(self) -> None:
        response = self.client.post("/lifelines/fifty-fifty", json={"questionId": "nope"})
        self.assertEqual(response.status_code, 400)

    def test_unexpected_failure_is_json_500(self) -> None:
        def broken(question_id):
            raise RuntimeError("pool went away")

        self.client.app.state.quiz_service.fifty_fifty = broken
        response = self.client.post("/lifelines/fifty-fifty", json={"questionId": self.question["id"]})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"message": "Failed to use lifeline."})

    def test_locked_day(self) -> None:
        client = build_client(clock=FixedClock(AFTER_DEADLINE))
        response = client.post("/lifelines/fifty-fifty", json={"questionId": self.question["id"]})
        self.assertEqual(response.status_code, 403)


if __name__ == "__main__":
    unittest.main()
