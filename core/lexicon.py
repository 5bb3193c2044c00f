"""
Word lists and patterns consulted by the response evaluator.

The built-in lexicon can be replaced wholesale by passing a ``Lexicon`` to
``ResponseEvaluator`` or partially overridden from a JSON file through
``load_lexicon``. Keys missing from the file keep their built-in values.
"""
import json
import re
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator


class LexiconError(ValueError):
    """Raised when a lexicon file cannot be read or does not validate."""


class KeywordSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    positive: List[str] = []
    negative: List[str] = []
    advanced: List[str] = []


class Lexicon(BaseModel):
    model_config = ConfigDict(frozen=True)

    keyword_dictionaries: Dict[str, KeywordSet]
    connectors: List[str]
    attitude_positive: List[str]
    attitude_negative: List[str]
    example_pattern: str
    sequencing_pattern: str
    reflection_pattern: str
    perspective_patterns: List[str]

    @field_validator("example_pattern", "sequencing_pattern", "reflection_pattern")
    @classmethod
    def _check_pattern(cls, value: str) -> str:
        _compile(value)
        return value

    @field_validator("perspective_patterns")
    @classmethod
    def _check_patterns(cls, value: List[str]) -> List[str]:
        for pattern in value:
            _compile(pattern)
        return value

    def keywords_for(self, major: Optional[str]) -> Optional[KeywordSet]:
        return self.keyword_dictionaries.get(major or "general")


def _compile(pattern: str) -> re.Pattern:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ValueError(f"bad pattern {pattern!r}: {e}") from e


DEFAULT_LEXICON = Lexicon(
    keyword_dictionaries={
        "education": KeywordSet(
            positive=[
                '教学方法', '学生', '课堂管理', '教育理念', '因材施教', '启发式', '互动',
                '多媒体', '实践', '创新', '合作学习', '评估', '反思', '专业发展',
                '沟通', '耐心', '责任心', '爱心', '引导', '激发兴趣', '个性化'
            ],
            negative=[
                '不知道', '没想过', '随便', '无所谓', '不care', '不管', '懒得',
                '应付', '敷衍', '混日子', '无聊', '烦人', '讨厌'
            ],
            advanced=[
                '建构主义', '多元智能', '差异化教学', '项目式学习', 'STEAM教育',
                '翻转课堂', '同伴评议', '反思性实践', '行动研究', '循证教学'
            ],
        ),
        "preschool_education": KeywordSet(
            positive=[
                '儿童发展', '游戏', '观察记录', '家园合作', '环境创设', '安全',
                '情感支持', '社交技能', '语言发展', '创造力', '想象力', '艺术',
                '音乐', '运动', '生活技能', '习惯养成', '个体差异'
            ],
            negative=[
                '不知道', '没想过', '随便', '无所谓', '不care', '哭闹', '难管',
                '调皮', '不听话', '烦人', '幼稚'
            ],
            advanced=[
                '蒙台梭利', '华德福', '瑞吉欧', '高瞻课程', '多元发展评估',
                '支架式教学', '最近发展区', '观察学习', '同伴互动'
            ],
        ),
        "computer_science": KeywordSet(
            positive=[
                '编程', '算法', '数据结构', '项目', '开源', 'github', '调试',
                '优化', '架构', '设计模式', '敏捷开发', '团队协作', '代码审查',
                '测试', '文档', '学习能力', '解决问题', '创新思维'
            ],
            negative=[
                '不知道', '没学过', '不会', '太难', '放弃', 'copy', '抄袭',
                '混过去', '应付', '不理解'
            ],
            advanced=[
                '机器学习', '深度学习', '微服务', '容器化', 'DevOps', 'CI/CD',
                '云计算', '分布式系统', '区块链', '人工智能', '大数据'
            ],
        ),
    },
    connectors=['因为', '所以', '但是', '然而', '此外', '另外', '首先', '其次', '最后', '总之'],
    attitude_positive=[
        '热爱', '喜欢', '兴趣', '激情', '努力', '坚持', '学习', '成长',
        '挑战', '机会', '希望', '相信', '自信', '积极', '主动', '认真'
    ],
    attitude_negative=[
        '讨厌', '厌烦', '无聊', '放弃', '算了', '不想', '懒得', '应付',
        '混', '凑合', '无所谓', '随便', '不care', '烦死了'
    ],
    example_pattern=r"例如|比如|举例|案例|经历",
    sequencing_pattern=r"首先|其次|然后|最后|第一|第二|第三",
    reflection_pattern=r"认为|觉得|感受|体会|反思|总结",
    perspective_patterns=[
        r"理论|概念|原理",  # theoretical
        r"实践|经验|操作",  # practical
        r"优点|缺点|利弊",  # pros and cons
        r"未来|发展|趋势",  # forward-looking
    ],
)


def load_lexicon(path: Optional[str] = None) -> Lexicon:
    """
    Build a lexicon from the built-in defaults and an optional JSON override.

    Args:
        path: JSON file whose top-level keys replace the matching defaults.
            ``keyword_dictionaries`` entries are merged per major.

    Returns:
        Lexicon instance

    Raises:
        LexiconError: if the file is missing, not JSON, or fails validation
    """
    if not path:
        return DEFAULT_LEXICON

    try:
        overrides = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise LexiconError(f"Cannot read lexicon file {path}: {e}") from e

    if not isinstance(overrides, dict):
        raise LexiconError(f"Lexicon file {path} must contain a JSON object")

    data = DEFAULT_LEXICON.model_dump()
    dictionaries = overrides.pop("keyword_dictionaries", None) or {}
    data.update(overrides)
    data["keyword_dictionaries"].update(dictionaries)

    try:
        return Lexicon.model_validate(data)
    except ValidationError as e:
        raise LexiconError(f"Invalid lexicon file {path}: {e}") from e
