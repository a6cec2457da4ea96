from django.conf import settings
from django.http import StreamingHttpResponse
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import APIView

from fitplan.core.state import generate_request_id
from fitplan.domains.workout import (
    edit_day_plan,
    generate_single_day,
    generate_week,
    stream_week_ndjson,
)
from fitplan.domains.workout.contract import (
    ACTION_EDIT,
    ACTIONS,
    DELIVERY_JSON,
    DELIVERY_NDJSON,
    MSG_GENERIC_FAILURE,
    MSG_VALIDATION_FAILED,
    is_valid_delivery_mode,
    msg_day_mismatch,
)
from fitplan.domains.workout.errors import (
    GenerationExhausted,
    InvalidRequest,
    MissingFields,
    PlanError,
    UnrecognizedAction,
)
from fitplan.domains.workout.schemas import dump_day_plan
from fitplan.serializers_plan import FitnessPlanRequestSerializer
from fitplan.shared.llm import get_llm_client


NDJSON_CONTENT_TYPE = "application/x-ndjson"


def _delivery_mode(validated: dict) -> str:
    stream = validated.get("stream")
    if stream is not None:
        return DELIVERY_NDJSON if stream else DELIVERY_JSON
    mode = (getattr(settings, "FITPLAN_WEEK_DELIVERY", DELIVERY_JSON) or DELIVERY_JSON).strip().lower()
    return mode if is_valid_delivery_mode(mode) else DELIVERY_JSON


class FitnessPlanView(APIView):
    """
    POST /api/fitness-plan/
    - action=generate + day  -> 1 DayPlan
    - action=generate        -> 7 DayPlan (JSON array hoặc NDJSON stream)
    - action=edit            -> 1 DayPlan đã sửa
    Client luôn nhận data hợp lệ hoặc {"error": ...}, không bao giờ nhận stack trace.
    """

    def post(self, request):
        request_id = generate_request_id()
        try:
            response = self._handle(request, request_id)
        except APIException as e:
            # body không parse được / content-type không hỗ trợ
            print(f"[API] request_id={request_id} api_error={type(e).__name__}: {e.detail}")
            response = Response(
                {"error": MSG_VALIDATION_FAILED, "details": {"non_field_errors": [str(e.detail)]}},
                status=e.status_code,
            )
        except GenerationExhausted as e:
            print(f"[API] request_id={request_id} generation_exhausted day={e.day} last_error={e.last_error}")
            response = Response(e.to_payload(), status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        except PlanError as e:
            # InvalidRequest / MissingFields / UnrecognizedAction
            extra = f" missing={','.join(e.missing)}" if isinstance(e, MissingFields) else ""
            print(f"[API] request_id={request_id} bad_request={type(e).__name__}: {e}{extra}")
            response = Response(e.to_payload(), status=status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            print(f"[API] request_id={request_id} unexpected_error={type(e).__name__}: {e}")
            response = Response({"error": MSG_GENERIC_FAILURE}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        response["X-Request-ID"] = request_id
        return response

    def _handle(self, request, request_id: str):
        ser = FitnessPlanRequestSerializer(data=request.data)
        if not ser.is_valid():
            raise InvalidRequest(details=ser.errors)

        data = ser.validated_data
        action = data["action"]
        if action not in ACTIONS:
            raise UnrecognizedAction(action)

        profile = {
            "fitness_goals": data.get("fitnessGoals", ""),
            "fitness_level": data.get("fitnessLevel", ""),
            "available_equipment": data.get("availableEquipment") or "",
        }
        day = data.get("day") or ""

        if action == ACTION_EDIT:
            missing = [
                name
                for name, value in (
                    ("day", day),
                    ("existingPlan", data.get("existingPlan")),
                    ("editInstructions", data.get("editInstructions")),
                )
                if value is None or value == ""
            ]
            if missing:
                raise MissingFields(missing)

            existing_plan = data["existingPlan"]
            if existing_plan.day != day:
                raise InvalidRequest(details={"day": [msg_day_mismatch(day, existing_plan.day)]})

            print(f"[API] request_id={request_id} action=edit day={day}")
            plan = edit_day_plan(
                get_llm_client(),
                day=day,
                existing_plan=existing_plan,
                edit_instructions=data["editInstructions"],
                request_id=request_id,
                **profile,
            )
            return Response(dump_day_plan(plan), status=status.HTTP_200_OK)

        if day:
            print(f"[API] request_id={request_id} action=generate day={day}")
            plan = generate_single_day(get_llm_client(), day=day, request_id=request_id, **profile)
            return Response(dump_day_plan(plan), status=status.HTTP_200_OK)

        mode = _delivery_mode(data)
        print(f"[API] request_id={request_id} action=generate week delivery={mode}")

        if mode == DELIVERY_NDJSON:
            response = StreamingHttpResponse(
                stream_week_ndjson(get_llm_client(), request_id=request_id, **profile),
                content_type=NDJSON_CONTENT_TYPE,
            )
            response["Cache-Control"] = "no-cache"
            return response

        result = generate_week(get_llm_client(), request_id=request_id, **profile)
        return Response([dump_day_plan(p) for p in result.days], status=status.HTTP_200_OK)
