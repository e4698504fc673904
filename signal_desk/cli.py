"""
Signal Desk CLI - Command line interface for the job signal desk.

Usage:
    python -m signal_desk [command] [options]

Commands:
    profile     Import, show or create the master resume
    audit       Audit text against the master resume
    optimize    Tailor the master resume to a signal
    signals     List, inject, fetch or remove job signals
    kanban      Show or move signals through the pipeline
    dashboard   Render a desk tab to HTML or markdown
    agents      Simulate and schedule scraper agents
    followup    Draft a recruiter follow-up for a signal
    config      Manage configuration

Examples:
    python -m signal_desk profile --parse resume.pdf --save
    python -m signal_desk audit --file tailored.txt
    python -m signal_desk optimize --job-id v10-001 --no-ai
    python -m signal_desk kanban --move v10-001 submitted
    python -m signal_desk agents --schedule linkedin "*/15 * * * *"
"""

from typing import Optional
import argparse
import json
import logging
import sys

from signal_desk.core import (
    HallucinationError,
    JobStatus,
    ProfileParser,
    find_violations,
    highlight,
    validate_job_injection,
)
from signal_desk.core.seed import sample_master_resume, sample_signals
from signal_desk.generators import FollowUpGenerator, ResumeOptimizer
from signal_desk.integrations import AgentRegistry, AgentScheduler
from signal_desk.tracker import AppState, DashboardRenderer, JsonFileStorage
from signal_desk.tracker.app_state import TABS
from signal_desk.utils import Config, LLMClient


def main(argv: Optional[list[str]] = None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Signal Desk - Verified job signals and hallucination-audited resume tailoring",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable info logging")
    parser.add_argument("--config", help="Path to config file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Profile command
    profile_parser = subparsers.add_parser("profile", help="Manage the master resume")
    profile_parser.add_argument("--parse", help="Parse a resume file (.json, .pdf, .docx, .txt, .md)")
    profile_parser.add_argument("--ai", action="store_true", help="Parse with the language model")
    profile_parser.add_argument("--save", action="store_true", help="Replace the stored master resume")
    profile_parser.add_argument("--show", action="store_true", help="Show the stored master resume")
    profile_parser.add_argument("--create-sample", action="store_true", help="Write a sample master resume")
    profile_parser.add_argument("--output", "-o", help="Output file for the resume JSON")

    # Audit command
    audit_parser = subparsers.add_parser("audit", help="Audit text against the master resume")
    audit_parser.add_argument("--text", "-t", help="Text to audit")
    audit_parser.add_argument("--file", "-f", help="File containing the text to audit")
    audit_parser.add_argument("--highlight", action="store_true", help="Mark unverified tokens inline")

    # Optimize command
    optimize_parser = subparsers.add_parser("optimize", help="Tailor the master resume to a signal")
    optimize_parser.add_argument("--job-id", "-j", help="Signal ID (defaults to the selected signal)")
    optimize_parser.add_argument("--no-ai", action="store_true", help="Use rule-based tailoring")
    optimize_parser.add_argument("--approve", action="store_true", help="Approve the audited artifact")
    optimize_parser.add_argument("--output", "-o", help="Write the artifact to a file")

    # Signals command
    signals_parser = subparsers.add_parser("signals", help="Manage job signals")
    signals_parser.add_argument("--all", "-a", action="store_true", help="Include quarantined signals")
    signals_parser.add_argument("--inject", help="Inject a signal from a JSON file")
    signals_parser.add_argument("--update", help="Signal ID to overwrite with --inject")
    signals_parser.add_argument("--remove", help="Remove a signal by ID")
    signals_parser.add_argument("--fetch", metavar="KEYWORDS", nargs="?", const="", help="Fetch live signals")
    signals_parser.add_argument("--agents", help="Comma-separated agent IDs for --fetch")
    signals_parser.add_argument("--limit", "-n", type=int, default=25, help="Max fetched signals")
    signals_parser.add_argument("--stats", action="store_true", help="Show statistics")

    # Kanban command
    kanban_parser = subparsers.add_parser("kanban", help="Pipeline view")
    kanban_parser.add_argument("--move", nargs=2, metavar=("JOB_ID", "STATUS"), help="Move a signal")

    # Dashboard command
    dashboard_parser = subparsers.add_parser("dashboard", help="Render a desk tab")
    dashboard_parser.add_argument("--tab", choices=TABS, default="dashboard")
    dashboard_parser.add_argument("--format", "-f", choices=["html", "markdown"], default="html")
    dashboard_parser.add_argument("--job-id", "-j", help="Signal to select")

    # Agents command
    agents_parser = subparsers.add_parser("agents", help="Scraper agents and schedules")
    agents_parser.add_argument("--list", "-l", action="store_true", help="List agents and schedules")
    agents_parser.add_argument("--simulate", metavar="AGENT", help="Dry-run an agent")
    agents_parser.add_argument("--schedule", nargs=2, metavar=("AGENT", "CRON"), help="Schedule an agent")
    agents_parser.add_argument("--unschedule", metavar="SCHEDULE_ID", help="Remove a schedule")
    agents_parser.add_argument("--tick", action="store_true", help="Run schedules due this minute")

    # Follow-up command
    followup_parser = subparsers.add_parser("followup", help="Draft a recruiter follow-up")
    followup_parser.add_argument("--job-id", "-j", help="Signal ID (defaults to the first stale signal)")
    followup_parser.add_argument("--no-ai", action="store_true", help="Use the outreach templates")

    # Config command
    config_parser = subparsers.add_parser("config", help="Manage configuration")
    config_parser.add_argument("--show", action="store_true", help="Show current config")
    config_parser.add_argument("--set", nargs=2, metavar=("KEY", "VALUE"), help="Set a config value")
    config_parser.add_argument("--set-api-key", nargs=2, metavar=("PROVIDER", "KEY"), help="Set API key")
    config_parser.add_argument("--init", action="store_true", help="Initialize default config")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        sys.exit(1)

    commands = {
        "profile": cmd_profile,
        "audit": cmd_audit,
        "optimize": cmd_optimize,
        "signals": cmd_signals,
        "kanban": cmd_kanban,
        "dashboard": cmd_dashboard,
        "agents": cmd_agents,
        "followup": cmd_followup,
        "config": cmd_config,
    }

    try:
        config = Config(args.config)
        commands[args.command](args, config)

    except KeyboardInterrupt:
        print("\n\nOperation cancelled.")
        sys.exit(1)
    except HallucinationError as e:
        print(f"\n❌ {e}")
        sys.exit(2)
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)


def build_state(config: Config) -> AppState:
    """Load the desk state from the configured data directory."""
    return AppState(
        storage=JsonFileStorage(config.get_data_dir()),
        initial_jobs=sample_signals(),
        initial_resume=sample_master_resume(),
        legitimacy_threshold=config.get_legitimacy_threshold(),
    )


def build_llm_client(config: Config, enabled: bool = True) -> Optional[LLMClient]:
    """Create a model client when enabled and an API key is available."""
    if not enabled:
        return None
    api_key = config.get_api_key("anthropic")
    if not api_key:
        return None
    return LLMClient(
        api_key=api_key,
        model=config.get("optimizer.model"),
        max_tokens=config.get("optimizer.max_tokens", 4000),
    )


def build_scheduler(config: Config, registry: AgentRegistry) -> AgentScheduler:
    return AgentScheduler(JsonFileStorage(config.get_data_dir()), known_agents=registry.ids())


def cmd_profile(args, config: Config):
    """Execute profile command."""
    if args.create_sample:
        resume = ProfileParser().create_sample_resume()
        output = args.output or "master_resume.json"
        with open(output, "w", encoding="utf-8") as f:
            json.dump(resume.to_dict(), f, indent=2)
        print(f"✅ Created sample master resume: {output}")

    elif args.parse:
        llm_client = build_llm_client(config, enabled=args.ai)
        if args.ai and llm_client is None:
            print("⚠️  No Anthropic API key configured, using heuristic parsing")

        resume = ProfileParser(llm_client=llm_client).parse_file(args.parse)

        print("\n📋 Parsed Master Resume\n")
        print(f"Name: {resume.personal_info.name}")
        print(f"Role: {resume.personal_info.role}")
        print(f"Location: {resume.personal_info.location}")
        print(f"\nCompetencies ({len(resume.core_competencies)}):")
        for competency in resume.core_competencies[:10]:
            print(f"  - {competency}")
        print(f"\nExperience ({len(resume.experience)} positions):")
        for entry in resume.experience[:3]:
            print(f"  - {entry.role} @ {entry.company}")

        if args.save:
            build_state(config).set_master_resume(resume)
            print("\n✅ Master Source Ingested Successfully.")

        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                json.dump(resume.to_dict(), f, indent=2)
            print(f"\n💾 Saved master resume to: {args.output}")

    elif args.show:
        print(json.dumps(build_state(config).master_resume.to_dict(), indent=2))

    else:
        print("Use --parse, --show, or --create-sample")


def cmd_audit(args, config: Config):
    """Execute audit command."""
    if args.file:
        with open(args.file, "r", encoding="utf-8") as f:
            text = f.read()
    elif args.text is not None:
        text = args.text
    else:
        print("Use --text or --file")
        return

    resume = build_state(config).master_resume
    violations = find_violations(text, resume)

    if args.highlight:
        for segments in highlight(text, resume):
            print("".join(f"[[{s.text}]]" if s.flagged else s.text for s in segments))
        print()

    if violations:
        print(f"❌ Hallucination detected: {len(violations)} unverified token(s)")
        for token in violations:
            print(f"   - {token}")
        sys.exit(2)

    print("✅ Audit passed: every token is backed by the master resume")


def cmd_optimize(args, config: Config):
    """Execute optimize command."""
    state = build_state(config)
    if args.job_id:
        if state.get_job(args.job_id) is None:
            print(f"❌ Signal {args.job_id} not found")
            sys.exit(1)
        state.select_job(args.job_id)

    job = state.selected_job
    if job is None:
        print("No verified signals to optimize for.")
        return

    llm_client = build_llm_client(config, enabled=not args.no_ai)
    optimizer = ResumeOptimizer(
        llm_client=llm_client,
        temperature=config.get("optimizer.temperature", 0.2),
    )

    print(f"🛠  Optimizing for {job.title} at {job.company}...")
    result = state.optimize(optimizer, use_ai=llm_client is not None)

    print(f"\n✅ Audit passed ({result.audit.candidate_token_count} tokens, source: {result.source})\n")
    print(result.candidate)
    print(f"\n{result.rationale}")

    if args.approve and state.approve():
        print("\n✅ Compliance approved")

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(result.candidate)
        print(f"\n💾 Saved artifact to: {args.output}")


def cmd_signals(args, config: Config):
    """Execute signals command."""
    state = build_state(config)

    if args.inject:
        with open(args.inject, "r", encoding="utf-8") as f:
            data = json.load(f)
        existing = state.get_job(args.update) if args.update else None
        if args.update and existing is None:
            print(f"❌ Signal {args.update} not found")
            sys.exit(1)
        job = state.save_job(validate_job_injection(data, existing=existing))
        print(f"✅ {state.notification} ({job.id})")

    elif args.remove:
        if state.remove_job(args.remove):
            print(f"✅ Removed signal {args.remove}")
        else:
            print(f"❌ Signal {args.remove} not found")

    elif args.fetch is not None:
        keywords = args.fetch or config.get("agents.default_keywords", "QA Automation")
        agent_ids = [a.strip() for a in args.agents.split(",")] if args.agents else None
        registry = AgentRegistry()
        if agent_ids:
            agent_ids = [registry.get(a).agent_id for a in agent_ids if registry.get(a)]

        print(f"🔍 Fetching signals for '{keywords}'...")
        signals = registry.fetch(
            keywords,
            limit=args.limit,
            agent_ids=agent_ids,
            parallel=config.get("agents.parallel", True),
        )
        for job in signals:
            state.save_job(job)
        verified = [j for j in signals if j.legitimacy >= state.legitimacy_threshold]
        print(f"\n✅ Ingested {len(signals)} signals ({len(signals) - len(verified)} quarantined)")

    elif args.stats:
        stats = state.statistics()
        print("\n📊 Signal Statistics")
        print("=" * 40)
        print(f"Total Signals: {stats['total']}")
        print(f"Verified: {stats['visible']}")
        print(f"Quarantined: {stats['quarantined']}")
        print(f"Average Score: {stats['average_score']:.1f}")
        print(f"Average Legitimacy: {stats['average_legitimacy']:.2f}")
        print(f"Stale: {stats['stale']}")
        print("\nBy Status:")
        for status, count in stats["by_status"].items():
            print(f"  {status.title()}: {count}")

    else:
        jobs = state.jobs if args.all else state.filtered_jobs
        print(f"\n📋 Signals ({len(jobs)} shown)\n")
        for job in sorted(jobs, key=lambda j: j.score, reverse=True):
            remote = " | Remote" if job.is_remote else ""
            print(f"{job.title} @ {job.company}")
            print(f"   Score: {job.score:.1f} | Legitimacy: {job.legitimacy:.2f} | {job.source_tier.value}{remote}")
            print(f"   Status: {job.status.value} | ID: {job.id}")
            print()


def cmd_kanban(args, config: Config):
    """Execute kanban command."""
    state = build_state(config)

    if args.move:
        job_id, status_value = args.move
        try:
            status = JobStatus(status_value)
        except ValueError:
            print(f"❌ Invalid status: {status_value}")
            print(f"   Valid statuses: {[s.value for s in JobStatus]}")
            sys.exit(1)

        job = state.move_job(job_id, status)
        if job is None:
            print(f"❌ Signal {job_id} not found")
            sys.exit(1)
        print(f"✅ Moved {job.company} to '{status.value}'")
        return

    for status, jobs in state.kanban_columns().items():
        print(f"\n{status.value.upper()} ({len(jobs)})")
        print("-" * 40)
        for job in jobs:
            flag = "  ⚠️  STALE: follow up" if state.is_stale(job) else ""
            print(f"  {job.company} - {job.title} [{job.id}]{flag}")


def cmd_dashboard(args, config: Config):
    """Execute dashboard command."""
    state = build_state(config)
    if args.job_id:
        state.select_job(args.job_id)
    state.set_active_tab(args.tab)

    registry = scheduler = None
    if args.tab == "scrapers":
        registry = AgentRegistry()
        scheduler = build_scheduler(config, registry)

    renderer = DashboardRenderer(output_dir=config.get_output_dir())
    filepath = renderer.render(state, format=args.format, registry=registry, scheduler=scheduler)

    print(f"\n✅ Dashboard generated: {filepath}")
    if args.format == "html":
        print("   Open in browser to view")


def cmd_agents(args, config: Config):
    """Execute agents command."""
    registry = AgentRegistry()
    scheduler = build_scheduler(config, registry)

    if args.simulate:
        for line in registry.simulate(args.simulate):
            print(line)

    elif args.schedule:
        agent_id, cron = args.schedule
        schedule = scheduler.add(agent_id, cron)
        print(f"✅ Scheduled {schedule.agent_id.value} at '{schedule.cron}' ({schedule.id})")

    elif args.unschedule:
        if scheduler.remove(args.unschedule):
            print(f"✅ Removed schedule {args.unschedule}")
        else:
            print(f"❌ Schedule {args.unschedule} not found")

    elif args.tick:
        logs = scheduler.tick(registry)
        if not logs:
            print("No schedules due.")
        for schedule_id, lines in logs.items():
            print(f"\n[{schedule_id}]")
            for line in lines:
                print(line)

    else:
        print("\n🤖 Agents\n")
        for agent_id, agent in registry.agents.items():
            print(f"  {agent_id.value:<12} {agent.name} ({agent.protocol})")
        schedules = scheduler.list()
        print(f"\n⏰ Schedules ({len(schedules)})\n")
        for schedule in schedules:
            print(f"  {schedule.agent_id.value:<12} {schedule.cron:<16} {schedule.id}")


def cmd_followup(args, config: Config):
    """Execute followup command."""
    state = build_state(config)

    if args.job_id:
        job = state.get_job(args.job_id)
    else:
        job = next((j for j in state.jobs if state.is_stale(j)), None)

    if job is None:
        print("No matching signal. Pass --job-id or wait for a stale submission.")
        return

    generator = FollowUpGenerator(llm_client=build_llm_client(config, enabled=not args.no_ai))
    state.follow_up(generator, job, use_ai=not args.no_ai)
    print(state.explanation)


def cmd_config(args, config: Config):
    """Execute config command."""
    if args.init:
        config.save()
        print(f"✅ Created config at: {config.config_path}")

    elif args.show:
        print("\n📋 Current Configuration\n")
        config.print_config()

    elif args.set:
        key, value = args.set
        # Try to parse as JSON for numbers and booleans
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            pass

        config.set(key, value)
        config.save()
        print(f"✅ Set {key} = {value}")

    elif args.set_api_key:
        provider, key = args.set_api_key
        config.set_api_key(provider, key)
        print(f"✅ Set API key for {provider}")

    else:
        print("Use --show, --set, --set-api-key, or --init")


if __name__ == "__main__":
    main()
