from rest_framework import serializers

from fitplan.domains.workout.contract import ACTION_GENERATE
from fitplan.domains.workout.schemas import check_day_plan, dump_day_plan


class DayPlanField(serializers.Field):
    """existingPlan phải validate đầy đủ theo DayPlan (Pydantic)."""

    default_error_messages = {
        "invalid": "existingPlan no cumple el esquema del plan diario.",
    }

    def to_internal_value(self, data):
        check = check_day_plan(data)
        if not check.ok:
            raise serializers.ValidationError(
                [f"{'.'.join(str(p) for p in e.get('loc', []))}: {e.get('msg')}" for e in check.errors]
                or [self.error_messages["invalid"]]
            )
        return check.plan

    def to_representation(self, value):
        return dump_day_plan(value)


class FitnessPlanRequestSerializer(serializers.Serializer):
    # action giữ CharField: giá trị lạ được báo riêng (UnrecognizedAction), không phải lỗi shape
    action = serializers.CharField(allow_blank=False, trim_whitespace=True)

    fitnessGoals = serializers.CharField(required=False, allow_blank=True, trim_whitespace=True)
    fitnessLevel = serializers.CharField(required=False, allow_blank=True, trim_whitespace=True)
    availableEquipment = serializers.CharField(required=False, allow_blank=True, default="")

    day = serializers.CharField(required=False, allow_blank=True, trim_whitespace=True)
    existingPlan = DayPlanField(required=False)
    editInstructions = serializers.CharField(required=False, allow_blank=True, trim_whitespace=True)

    # override delivery mode cho cả tuần (mặc định lấy từ settings)
    stream = serializers.BooleanField(required=False)

    def validate(self, attrs):
        # generate cần đủ goals + level; edit thì không bắt buộc
        if attrs.get("action") == ACTION_GENERATE:
            errors = {}
            for name in ("fitnessGoals", "fitnessLevel"):
                if name not in attrs:
                    errors[name] = ["Este campo es obligatorio."]
            if errors:
                raise serializers.ValidationError(errors)

        attrs.setdefault("fitnessGoals", "")
        attrs.setdefault("fitnessLevel", "")
        return attrs
