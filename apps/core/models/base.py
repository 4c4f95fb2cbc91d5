# PATH: apps/core/models/base.py
"""
공통 베이스 모델 (TimestampModel)

Worker/API 공유 — apps.api 의존 없이 core에 정의.
"""
from django.db import models


class TimestampModel(models.Model):
    """생성/수정 시간 자동 기록 추상 모델"""
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
