"""
Built-in campus-recruitment question pools, keyed by major.
"""
from typing import Dict, List

from models.interview import Question


def _pool(category: str, entries) -> List[Question]:
    return [
        Question(title=title, content=content, expected_duration=duration, category=category)
        for title, content, duration in entries
    ]


QUESTION_POOLS: Dict[str, List[Question]] = {
    "general": _pool("general", [
        ("请简单介绍一下自己",
         "请用2-3分钟时间介绍你的基本情况、专业背景、实习经历和个人特长。", 180),
        ("为什么选择我们公司？",
         "请说明你对我们公司的了解，以及为什么想要加入我们公司工作。", 120),
        ("你的职业规划是什么？",
         "请谈谈你对未来3-5年的职业发展规划和目标。", 150),
        ("描述一次克服困难的经历",
         "请分享一个你在学习或实践中遇到挫折并成功克服的具体案例。", 200),
        ("你认为自己的优势和不足是什么？",
         "请客观分析自己的优势和需要改进的地方，以及你如何提升自己。", 180),
        ("如何处理工作中的压力？",
         "当面临紧急项目或工作压力时，你会如何调整状态和管理时间？", 150),
        ("描述一次团队合作的经历",
         "请分享一个你参与团队项目的经历，你在其中承担了什么角色？", 200),
    ]),
    "education": _pool("education", [
        ("如何处理课堂上学生的突发状况？",
         "请描述一个具体的情况，比如学生在课堂上发生冲突，你会如何处理？", 180),
        ("你如何激发学生的学习兴趣？",
         "请结合具体的教学方法，说明如何让学生主动参与课堂学习。", 200),
        ("如何与家长有效沟通？",
         "当学生在学校表现不佳时，你会如何与家长沟通并制定改进计划？", 180),
        ("请描述你的教学理念和方法",
         "作为一名教师，你认为最重要的教学原则是什么？请结合具体例子说明你的教学方法。", 240),
        ("如何进行差异化教学？",
         "面对学习能力不同的学生，你会如何调整教学策略以确保每个学生都能有所收获？", 200),
        ("如何运用现代技术辅助教学？",
         "请说明你会如何在课堂中使用多媒体、网络等现代技术来提升教学效果。", 180),
        ("处理学生学习困难的策略",
         "当发现学生在某个知识点上反复出错时，你会采取什么措施帮助他们？", 200),
        ("如何建立良好的师生关系？",
         "请分享你建立和维护良好师生关系的方法和经验。", 180),
        ("如何进行有效的课堂管理？",
         "请描述你会如何维持课堂秩序，创造良好的学习环境。", 190),
        ("你如何评估学生的学习成果？",
         "除了传统考试，你会采用哪些方式来全面评估学生的学习情况？", 200),
    ]),
    "preschool_education": _pool("preschool_education", [
        ("如何设计适合3-6岁儿童的游戏活动？",
         "请描述一个具体的游戏活动设计，说明如何通过游戏促进儿童发展。", 200),
        ("如何处理幼儿的分离焦虑？",
         "新入园的幼儿经常出现哭闹，不愿与家长分离，你会如何帮助他们适应？", 180),
        ("如何观察和记录幼儿的发展情况？",
         "请说明你会关注幼儿发展的哪些方面，以及如何进行有效记录。", 200),
        ("如何培养幼儿的社交能力？",
         "请描述你会采用哪些方法帮助幼儿学会与同伴友好相处和合作。", 180),
        ("如何创设适宜的学习环境？",
         "请说明你会如何布置和管理幼儿园教室，以促进幼儿的学习和发展。", 200),
        ("如何处理幼儿的行为问题？",
         "当幼儿出现攻击性行为或不遵守规则时，你会采取什么策略？", 180),
        ("如何开展幼儿艺术教育活动？",
         "请设计一个美术或音乐活动，说明如何激发幼儿的创造力和想象力。", 240),
        ("如何与家长建立良好的合作关系？",
         "请分享你与家长沟通合作的方法，以及如何处理家长的不同意见。", 200),
        ("如何促进幼儿语言发展？",
         "请说明你会采用哪些活动和方法来提升幼儿的语言表达能力。", 190),
        ("如何培养幼儿的自理能力？",
         "请描述你会如何帮助幼儿养成良好的生活习惯和自理能力。", 180),
    ]),
    "computer_science": _pool("computer_science", [
        ("请介绍一个你完成的编程项目",
         "请详细描述一个你参与或独立完成的编程项目，包括技术栈、遇到的挑战和解决方案。", 240),
        ("如何优化程序性能？",
         "请谈谈你在编程中如何发现和解决性能问题，有哪些常用的优化策略？", 200),
        ("你对哪种编程语言最熟悉？",
         "请选择一种你最熟悉的编程语言，说明它的特点和你使用它的经验。", 180),
        ("如何设计一个数据库？",
         "假设要为一个电商网站设计数据库，你会考虑哪些表结构和关系？", 200),
        ("前端和后端的区别是什么？",
         "请说明前端开发和后端开发的职责分工，以及你更偏向哪个方向？", 150),
        ("如何确保代码质量？",
         "请分享你在项目开发中如何保证代码质量，包括测试、代码审查等方面。", 180),
    ]),
    "business": _pool("business", [
        ("如何分析市场竞争环境？",
         "请说明你会采用哪些方法来分析一个行业的竞争状况和市场机会。", 200),
        ("描述一次成功的团队领导经历",
         "请分享一个你担任团队负责人的经历，你是如何协调团队完成目标的？", 180),
        ("如何制定商业计划？",
         "假设要开展一个新业务，你会如何制定详细的商业计划和实施策略？", 240),
        ("你如何理解企业文化？",
         "请谈谈企业文化对组织发展的重要性，以及如何建设良好的企业文化。", 150),
        ("如何进行成本控制？",
         "在企业运营中，你认为应该如何有效控制成本并提高运营效率？", 180),
    ]),
    "marketing": _pool("marketing", [
        ("如何制定营销策略？",
         "请描述一个完整的营销策略制定过程，包括目标受众分析和渠道选择。", 200),
        ("数字化营销的重要性",
         "请谈谈社交媒体和数字化平台在现代营销中的作用和优势。", 180),
        ("如何分析消费者行为？",
         "请说明你会通过哪些方法来了解和分析目标消费者的需求和偏好。", 190),
        ("品牌建设的关键要素",
         "你认为成功的品牌建设需要考虑哪些关键因素？请举例说明。", 180),
        ("如何衡量营销效果？",
         "请分享你会使用哪些指标和方法来评估营销活动的成效。", 150),
    ]),
    "engineering": _pool("engineering", [
        ("请介绍一个你参与的工程项目",
         "请详细描述一个你参与设计或实施的工程项目，包括技术方案和解决的问题。", 240),
        ("如何进行电路设计和优化？",
         "请说明你在电路设计中的思路和方法，如何确保电路的稳定性和效率。", 200),
        ("新技术在工程中的应用",
         "请谈谈物联网、人工智能等新技术在电子工程领域的应用前景。", 180),
        ("工程项目的质量控制",
         "在工程项目实施过程中，你会采用哪些方法来确保项目质量？", 180),
        ("如何解决技术难题？",
         "当在工程项目中遇到技术瓶颈时，你会采用什么方法来分析和解决问题？", 180),
    ]),
}

# Templates used when a major has no built-in pool
GENERIC_TEMPLATES = [
    ("请结合{major}专业背景介绍一下你自己",
     "请简要介绍一下你的{major}专业学习经历、相关实践经验和个人特点。", 150),
    ("你对这个职位的理解是什么？",
     "请谈谈你对这个工作职责的理解，以及你认为需要具备哪些关键能力。", 180),
    ("你在{major}专业学习中最大的收获是什么？",
     "请分享一个你在专业学习过程中印象最深刻的经历和收获。", 200),
]

FALLBACK_TITLE = "请结合{major}专业谈谈你的优势"
FALLBACK_CONTENT = "请从专业知识、实践经验和个人特质等方面，谈谈你在{major}领域的优势和特点。"
FALLBACK_DURATION = 180


def generic_pool(major: str) -> List[Question]:
    return [
        Question(
            title=title.format(major=major),
            content=content.format(major=major),
            expected_duration=duration,
            category=major
        )
        for title, content, duration in GENERIC_TEMPLATES
    ]


def pool_for(major: str) -> List[Question]:
    """Return the question pool for a major, synthesizing one for unknown majors."""
    if major in QUESTION_POOLS:
        return list(QUESTION_POOLS[major])
    return generic_pool(major)


def known_majors() -> List[str]:
    return list(QUESTION_POOLS.keys())
