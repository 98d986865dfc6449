import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from rivalry.errors import RivalryError
from rivalry.models.dc_models import (
    FiftyFiftyRequestModel,
    FiftyFiftyResultModel,
    LeaderboardTodayModel,
    QuizTodayModel,
    SubmitRequestModel,
    SubmitResultModel,
)
from rivalry.services.daily_quiz import DailyQuizService

quiz_router = APIRouter()


def get_quiz_service(request: Request) -> DailyQuizService:
    return request.app.state.quiz_service


def _failure(message: str, e: Exception) -> JSONResponse:
    logging.error(f"{message} {e!r}")
    return JSONResponse(status_code=500, content={"message": message})


class QuizAPI:
    @staticmethod
    @quiz_router.get("/quiz-today", response_model=QuizTodayModel)
    async def quiz_today(service: DailyQuizService = Depends(get_quiz_service)):
        try:
            return service.quiz_today()
        except RivalryError:
            raise
        except Exception as e:
            return _failure("Failed to load quiz.", e)

    @staticmethod
    @quiz_router.post("/lifelines/fifty-fifty", response_model=FiftyFiftyResultModel)
    async def fifty_fifty(
        body: FiftyFiftyRequestModel,
        service: DailyQuizService = Depends(get_quiz_service),
    ):
        try:
            return service.fifty_fifty(body.question_id)
        except RivalryError:
            raise
        except Exception as e:
            return _failure("Failed to use lifeline.", e)


class LeaderboardAPI:
    @staticmethod
    @quiz_router.get("/leaderboard-today", response_model=LeaderboardTodayModel)
    async def leaderboard_today(service: DailyQuizService = Depends(get_quiz_service)):
        try:
            return await service.leaderboard_today()
        except RivalryError:
            raise
        except Exception as e:
            return _failure("Failed to load leaderboard.", e)


class SubmissionAPI:
    @staticmethod
    @quiz_router.post("/submit", response_model=SubmitResultModel)
    async def submit(
        body: SubmitRequestModel,
        service: DailyQuizService = Depends(get_quiz_service),
    ):
        try:
            return await service.submit(body)
        except RivalryError:
            raise
        except Exception as e:
            return _failure("Failed to submit results.", e)
