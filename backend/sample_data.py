"""
Product Workbench - Built-in Sample Data
Seed collections loaded into a fresh workbench. Every call returns new
record objects so workbenches never share state.
"""

from typing import List

from models import (
    DocumentCategory, DocumentRecord, NavGroup, NavResource, OutboundRequestRecord,
    ProductRecord, ReleaseRecord, TicketPriority, TicketRecord, TicketStatus,
    User, UserRole, VersionRecord,
)


def sample_user() -> User:
    return User(
        id="u1",
        name="Alex Chen",
        avatar="https://picsum.photos/seed/alex/200/200",
        role=UserRole.AGENT,
    )


def sample_products() -> List[ProductRecord]:
    return [
        ProductRecord(
            id="p1", name="Cloud ERP Core",
            description="企业资源规划核心系统，处理财务与库存。",
            owner="Sarah Miller", health=98, active_tickets=12, icon="Box",
        ),
        ProductRecord(
            id="p2", name="Nexus Mobile App",
            description="面向终端用户的移动端应用 (iOS/Android)。",
            owner="David Li", health=85, active_tickets=34, icon="Smartphone",
        ),
        ProductRecord(
            id="p3", name="Data Analytics Gateway",
            description="大数据处理与BI报表网关服务。",
            owner="Emily Zhang", health=45, active_tickets=8, icon="BarChart",
        ),
    ]


def sample_tickets() -> List[TicketRecord]:
    return [
        TicketRecord(
            id="T-1024",
            title="ERP 系统登录延迟严重",
            description="多名财务部员工报告在早上 9 点高峰期登录 ERP 系统时，页面加载超过 30 秒，有时直接超时。",
            status=TicketStatus.OPEN,
            priority=TicketPriority.HIGH,
            type="Performance",
            customer_name="Global Finance Corp",
            reporter_id="u5",
            product_version="v2.4.0",
            product_id="p1",
            dev_owner="Sarah Miller",
            created_at="2023-10-26T08:30:00Z",
            updated_at="2023-10-26T09:00:00Z",
            reporting_month="2023-10",
            tags=["Login", "Timeout", "Finance"],
        ),
        TicketRecord(
            id="T-1025",
            title="移动端无法上传头像",
            description="用户在 iOS 17 上尝试更新个人资料头像时，APP 闪退。复现步骤：进入设置 -> 个人信息 -> 点击头像 -> 选择照片。",
            status=TicketStatus.IN_PROGRESS,
            priority=TicketPriority.MEDIUM,
            type="Bug",
            customer_name="Retail Users",
            product_version="v4.1.2",
            product_id="p2",
            assignee_id="u1",
            reporter_id="u8",
            test_owner="Jessica Wu",
            created_at="2023-10-25T14:15:00Z",
            updated_at="2023-10-26T10:20:00Z",
            reporting_month="2023-10",
            root_cause_category="Code Logic",
            introduction_stage="Development",
            tags=["iOS", "Crash", "Profile"],
        ),
        TicketRecord(
            id="T-1026",
            title="请求增加导出 CSV 功能",
            description="目前报表只能导出 PDF，财务团队希望增加 CSV 格式以便进行二次数据分析。",
            status=TicketStatus.OPEN,
            priority=TicketPriority.LOW,
            type="Feature Request",
            customer_name="Internal Finance",
            product_version="v1.0.0",
            product_id="p3",
            reporter_id="u12",
            created_at="2023-10-24T11:00:00Z",
            updated_at="2023-10-24T11:00:00Z",
            reporting_month="2023-10",
            tags=["Export", "Feature"],
        ),
        TicketRecord(
            id="T-1027",
            title="数据库连接池耗尽报警",
            description="监控系统检测到 Analytics Gateway 的主数据库连接池在过去 1 小时内 3 次达到 100% 占用。",
            status=TicketStatus.OPEN,
            priority=TicketPriority.CRITICAL,
            type="Infrastructure",
            customer_name="Internal Ops",
            product_version="v1.2.0",
            product_id="p3",
            reporter_id="sys_monitor",
            created_at="2023-10-26T10:45:00Z",
            updated_at="2023-10-26T10:45:00Z",
            reporting_month="2023-10",
            attachment_url="https://example.com/logs/db_pool.log",
            tags=["Database", "Alert", "Infra"],
        ),
    ]


def sample_versions() -> List[VersionRecord]:
    return [
        VersionRecord(
            id="v1",
            product_name="基础组件平台",
            version="v2.0.0",
            name="平台基础版本",
            type="STANDARD",
            features="整合项目，需求，计划，架构，测试管理平台方案。",
            status="RELEASED",
            progress=100,
            customers=["Standard Market"],
            env_requirements="Linux/Docker",
            start_date="2023-01-01",
            end_date="2023-06-30",
            planned_uat_date="2023-06-01",
            actual_uat_date="2023-06-05",
            product_manager="王如阳",
            version_admin="叶彩霞",
            uat_tester="肖建军",
            is_ready_for_delivery=True,
        ),
        VersionRecord(
            id="v2",
            product_name="基础组件平台",
            version="v2.1.0-202309",
            name="平台功能优化版",
            type="STANDARD",
            features="完整整合项目，需求，建模，DevOps，后端开发，前端开发。",
            status="RELEASED",
            progress=100,
            customers=["Internal"],
            env_requirements="K8s Cluster",
            start_date="2023-07-01",
            end_date="2023-09-30",
            planned_uat_date="2023-09-15",
            actual_uat_date="2023-09-15",
            product_manager="王如阳",
            version_admin="叶彩霞",
            uat_tester="肖建军",
            is_ready_for_delivery=True,
            is_archived=True,
            related_release_version="REL-2.1.0",
        ),
        VersionRecord(
            id="v3",
            product_name="前端开发框架",
            version="v2.2",
            name="组件化增强版",
            type="STANDARD",
            features="1. Vue3.0 升级改造 2. 提供组件、模板市场能力 3. 性能优化",
            status="DEVELOPING",
            progress=65,
            env_requirements="Node 18+",
            start_date="2023-10-01",
            end_date="2025-01-23",
            planned_uat_date="2024-12-30",
            product_manager="向楠",
            version_admin="向楠",
            uat_tester="TBD",
            dependencies="基础组件 v2.1.0",
        ),
        VersionRecord(
            id="v4",
            product_name="工作流产品",
            version="v9.1",
            name="东亚银行定制版",
            type="CUSTOMIZED",
            features="1. 国际化支持 2. 数据库兼容 DB2 3. 审批流特殊节点逻辑",
            status="UAT_VERIFYING",
            progress=90,
            customers=["BEA Bank"],
            env_requirements="AIX/DB2",
            start_date="2023-08-01",
            end_date="2023-12-30",
            planned_uat_date="2023-11-15",
            actual_uat_date="2023-11-20",
            delivery_date="2023-12-15",
            product_manager="郭璐晓",
            version_admin="郭璐晓",
            uat_deployer="Ops Team",
            uat_tester="Test Team A",
            is_ready_for_delivery=True,
            is_delayed=True,
            exception_note="DB2 Driver compatibility issues caused 5 day delay",
        ),
    ]


def sample_releases() -> List[ReleaseRecord]:
    return [
        ReleaseRecord(
            id="r1",
            version="v2.3.1 Hotfix",
            date="Yesterday 14:30",
            type="Hotfix",
            title="Fix payment callback failure",
            description="修复了安卓端支付回调偶尔失败的问题；优化了首页加载速度。",
            items=["Android Pay Callback Fix", "Home Load Optimization"],
        ),
        ReleaseRecord(
            id="r2",
            version="v2.3.0 Official",
            date="2023-10-15",
            type="Feature",
            title="Dark Mode & User Center",
            description="新增暗黑模式主题切换；重构了用户中心模块。",
            items=["Dark Mode Support", "User Center Refactor", "Performance Tuning"],
        ),
    ]


# (title, category, updated_at, author); None author = the version's product team
DOCUMENT_TEMPLATE = [
    ("产品白皮书", DocumentCategory.MARKET, "2023-10-01", None),
    ("产品介绍PPT", DocumentCategory.MARKET, "2023-10-02", None),
    ("案例清单", DocumentCategory.MARKET, "2023-10-03", None),
    ("典型案例", DocumentCategory.MARKET, "2023-10-03", None),
    ("营销话术与控标点", DocumentCategory.MARKET, "2023-10-04", None),
    ("一纸禅", DocumentCategory.MARKET, "2023-10-04", None),
    ("方案建议书", DocumentCategory.MARKET, "2023-10-05", None),
    ("用户快速操作手册", DocumentCategory.DELIVERY, "2023-10-10", None),
    ("用户手册", DocumentCategory.DELIVERY, "2023-10-10", None),
    ("部署手册", DocumentCategory.DELIVERY, "2023-10-11", "DevOps"),
    ("配置建议书", DocumentCategory.DELIVERY, "2023-10-11", "Arch"),
    ("产品培训材料PPT", DocumentCategory.DELIVERY, "2023-10-12", None),
    ("产品培训视频", DocumentCategory.DELIVERY, "2023-10-13", None),
    ("培训视频", DocumentCategory.DELIVERY, "2023-10-13", None),
    ("运维手册", DocumentCategory.OPS, "2023-10-15", "SRE"),
    ("需求规格说明书 (SRS)", DocumentCategory.RND, "2023-09-01", "Alice"),
    ("概要设计", DocumentCategory.RND, "2023-09-05", "Bob"),
    ("详细设计", DocumentCategory.RND, "2023-09-10", "Bob"),
    ("系统开发手册和开发规范", DocumentCategory.RND, "2023-09-01", "Tech Lead"),
    ("接口说明", DocumentCategory.RND, "2023-09-15", "Dev Team"),
    ("数据库设计", DocumentCategory.RND, "2023-09-15", "DBA"),
    ("系统功能测试用例", DocumentCategory.RND, "2023-09-20", "QA"),
    ("系统测试报告", DocumentCategory.RND, "2023-10-01", "QA"),
    ("性能测试报告", DocumentCategory.RND, "2023-10-01", "QA"),
    ("安全扫描报告", DocumentCategory.RND, "2023-10-02", "Sec Team"),
]


def version_documents(version_id: str, author: str = "Product Team") -> List[DocumentRecord]:
    return [
        DocumentRecord(
            id=f"d_{version_id}_{n}",
            title=title,
            category=category,
            version_id=version_id,
            updated_at=updated_at,
            author=doc_author or author,
            url="#",
        )
        for n, (title, category, updated_at, doc_author) in enumerate(DOCUMENT_TEMPLATE, start=1)
    ]


def sample_documents() -> List[DocumentRecord]:
    return version_documents("v1") + version_documents("v2")


def sample_outbound_requests() -> List[OutboundRequestRecord]:
    return [
        OutboundRequestRecord(
            id="OB-20231001",
            application_date="2023-10-01",
            product_id="p1",
            product_name="Cloud ERP Core",
            version_id="v2",
            version="v2.1.0-202309",
            applicant="John Doe",
            project_side="ABC Finance Group",
            requirements="Standard Deployment",
            artifact_url="http://repo.nexus.com/v2.1.0",
            document_url="http://docs.nexus.com/v2.1.0",
            status="APPROVED",
            operator="Admin User",
            operation_time="2023-10-02 10:00:00",
        ),
        OutboundRequestRecord(
            id="OB-20231005",
            application_date="2023-10-05",
            product_id="p2",
            product_name="Nexus Mobile App",
            version_id="v3",
            version="v2.2",
            applicant="Jane Smith",
            project_side="Retail Chain X",
            requirements="Custom Logo Integration",
            status="PENDING",
        ),
        OutboundRequestRecord(
            id="OB-20231012",
            application_date="2023-10-12",
            product_id="p4",
            product_name="工作流产品",
            version_id="v4",
            version="v9.1",
            applicant="Guo Luxiao",
            project_side="BEA Bank",
            requirements="Requires DB2 drivers pre-installed",
            artifact_url="http://repo.nexus.com/v9.1/bea",
            status="APPROVED",
            operator="Ops Team",
            operation_time="2023-10-13 09:30:00",
        ),
    ]


def _resource(id, name, description, url, icon, bg_color) -> NavResource:
    return NavResource(id=id, name=name, description=description, url=url, icon=icon, bg_color=bg_color)


def sample_nav_groups() -> List[NavGroup]:
    return [
        NavGroup(id="g1", title="研发工具链 (DevOps)", items=[
            _resource("r1", "GitLab", "代码托管与 CI/CD 流水线平台", "https://gitlab.com", "Gitlab", "bg-orange-100 text-orange-600"),
            _resource("r2", "Jenkins", "自动化构建、测试与部署服务", "#", "Container", "bg-slate-100 text-slate-600"),
            _resource("r3", "SonarQube", "代码质量检查与安全扫描", "#", "Code2", "bg-blue-100 text-blue-600"),
            _resource("r4", "Nexus Repo", "Maven/NPM 制品库管理", "#", "Database", "bg-green-100 text-green-600"),
        ]),
        NavGroup(id="g2", title="产品与协作 (Collaboration)", items=[
            _resource("r5", "Confluence", "企业级知识库与产品文档协作", "#", "BookOpen", "bg-blue-100 text-blue-700"),
            _resource("r6", "Jira Software", "敏捷项目管理与缺陷追踪系统", "#", "Ticket", "bg-blue-50 text-blue-600"),
            _resource("r7", "Figma", "UI/UX 界面设计与原型协作", "#", "Figma", "bg-purple-100 text-purple-600"),
            _resource("r8", "Miro", "在线白板与头脑风暴", "#", "Layout", "bg-yellow-100 text-yellow-600"),
        ]),
        NavGroup(id="g3", title="资源与文档 (Resources)", items=[
            _resource("r9", "Ant Design", "企业级 UI 设计语言与组件库", "https://ant.design", "Component", "bg-red-50 text-red-600"),
            _resource("r10", "Tailwind CSS", "原子化 CSS 框架文档", "https://tailwindcss.com", "Wind", "bg-cyan-50 text-cyan-600"),
            _resource("r11", "React Docs", "React 官方中文文档", "https://react.dev", "Atom", "bg-slate-800 text-cyan-400"),
        ]),
        NavGroup(id="g4", title="常用系统 (Management)", items=[
            _resource("r12", "OA 系统", "内部办公自动化审批流程", "#", "Briefcase", "bg-indigo-100 text-indigo-600"),
            _resource("r13", "CRM 客户管理", "销售线索与客户关系维护", "#", "Users", "bg-pink-100 text-pink-600"),
            _resource("r14", "BI 报表平台", "运营数据可视化分析大屏", "#", "BarChart", "bg-emerald-100 text-emerald-600"),
        ]),
    ]
