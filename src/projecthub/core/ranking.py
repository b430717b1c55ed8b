"""任务排序 -- 截止日期优先，其次优先级

排序规则：
1. 有截止日期的任务总在没有截止日期的任务之前，有日期的按日期升序；
   两个都没有日期的任务在此键上相等
2. 日期相同（或都没有）时按优先级 urgent < high < medium < low，未设置按 medium
3. 两键都相同时保持输入相对顺序（稳定排序）

一个有日期、一个没有日期的情况完全由第 1 条决定，不再比较优先级。
"""

from collections.abc import Iterable
from datetime import date

from .config import DUE_SOON_DAYS
from .models.enums import priority_rank
from .models.task import Task, parse_deadline


def task_sort_key(task: Task) -> tuple[int, date, int]:
    """单个任务的排序键"""
    deadline = parse_deadline(task.deadline)
    rank = priority_rank(task.priority)
    if deadline is None:
        # date.max 仅用于凑齐元组类型，无日期任务之间只比较优先级
        return (1, date.max, rank)
    return (0, deadline, rank)


def rank_tasks(tasks: Iterable[Task]) -> list[Task]:
    """返回排好序的新列表，不修改输入"""
    return sorted(tasks, key=task_sort_key)


def days_until_deadline(deadline: object, today: date) -> int | None:
    """距截止日期的天数，已过期为负数，没有截止日期返回 None"""
    parsed = parse_deadline(deadline)
    if parsed is None:
        return None
    return (parsed - today).days


def is_overdue(deadline: object, today: date) -> bool:
    """截止日期早于今天即为过期"""
    days = days_until_deadline(deadline, today)
    return days is not None and days < 0


def is_due_soon(deadline: object, today: date) -> bool:
    """未过期且剩余天数不超过 DUE_SOON_DAYS"""
    days = days_until_deadline(deadline, today)
    return days is not None and 0 <= days <= DUE_SOON_DAYS
